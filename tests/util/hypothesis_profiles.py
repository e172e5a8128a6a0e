from __future__ import annotations

import os

from hypothesis import HealthCheck, Phase, settings

# Map operations are cheap; the model tests pass deadline=None themselves.
settings.register_profile(
    "default",
    max_examples=40,
    derandomize=True,
    print_blob=True,
)

# Quick local loop: fewer examples and no shrink phase.
settings.register_profile(
    "dev",
    max_examples=20,
    phases=(Phase.explicit, Phase.reuse, Phase.generate),
)

# CI: more examples to hit colliding-key and resize edge cases.
settings.register_profile(
    "ci",
    max_examples=300,
    deadline=None,
    derandomize=True,
    print_blob=True,
    suppress_health_check=[HealthCheck.too_slow],
)

default_profile = os.getenv("HYPOTHESIS_PROFILE", "default")
settings.load_profile(default_profile)

__all__ = ["default_profile"]
