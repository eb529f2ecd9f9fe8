"""
Random environment names.

Generated names look like ``bbl-env-quiet-heron-4f2a9c``: a fixed prefix, an
adjective-noun token and a short random suffix.
"""

from __future__ import annotations

import random
import re
import secrets

ENV_ID_PREFIX = "bbl-env"
MAX_NAME_LENGTH = 63

# Lowercase letter first, then letters, digits or hyphens, not ending in a hyphen.
NAME_PATTERN = re.compile(r"^[a-z](?:[-a-z0-9]*[a-z0-9])?$")

ADJECTIVES = [
    "amber", "brisk", "calm", "dusty", "eager", "fancy", "gentle", "hazy",
    "icy", "jolly", "keen", "lively", "misty", "noble", "olive", "proud",
    "quiet", "rapid", "sunny", "tidy", "upbeat", "vivid", "witty", "young",
]

NOUNS = [
    "alder", "badger", "cedar", "delta", "egret", "falcon", "glacier", "heron",
    "inlet", "juniper", "kestrel", "lagoon", "marsh", "nettle", "otter", "prairie",
    "quarry", "river", "spruce", "tundra", "upland", "valley", "willow", "yarrow",
]


def is_valid_name(name: str) -> bool:
    return len(name) <= MAX_NAME_LENGTH and NAME_PATTERN.match(name) is not None


def generate_env_name(rng: random.Random | None = None) -> str:
    rng = rng or random.Random()
    token = f"{rng.choice(ADJECTIVES)}-{rng.choice(NOUNS)}"
    return f"{ENV_ID_PREFIX}-{token}-{secrets.token_hex(3)}"
