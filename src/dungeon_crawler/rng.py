from __future__ import annotations

import hashlib
import json
import logging
import random
import secrets
from dataclasses import dataclass
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

Seed = Union[int, str, bytes, None]

LEVEL_LAYOUT = "level_layout"


def _stable_json(value: Any) -> str:
    """Key-sorted, whitespace-free JSON so derived seeds do not depend on dict order."""
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


@dataclass(frozen=True)
class RNGManager:
    """Hands out independent ``random.Random`` streams derived from one master seed.

    Each stream is keyed by a domain name and identifiers, so the layout of level 3
    is the same no matter how many other streams were drawn before it:

        rngm = RNGManager("my-run")
        layout_rng = rngm.level_rng(depth=3)

    With no master seed a random one is drawn once and kept, so a run can still be
    replayed by logging ``get_master_seed_hex()``.
    """

    master_seed: Seed = None

    def __post_init__(self) -> None:
        if self.master_seed is None:
            raw = secrets.token_bytes(16)
            logger.info("No master seed provided; generated random seed: %s", raw.hex())
        else:
            raw = self._canonicalize_seed(self.master_seed)
            logger.debug("Using master seed: %r", self.master_seed)
        object.__setattr__(self, "_master_bytes", raw)

    @staticmethod
    def _canonicalize_seed(seed: Seed) -> bytes:
        if seed is None:
            return b""
        if isinstance(seed, bytes):
            return seed
        if isinstance(seed, bool):
            raise TypeError("Unsupported seed type: %r" % (type(seed),))
        if isinstance(seed, int):
            if seed < 0:
                seed = seed & 0xFFFFFFFFFFFFFFFF
            length = (seed.bit_length() + 7) // 8 or 1
            return seed.to_bytes(length, "big", signed=False)
        if isinstance(seed, str):
            text = seed.strip()
            if text.startswith("0x"):
                try:
                    value = int(text, 16)
                except ValueError:
                    return text.encode("utf-8")
                length = (value.bit_length() + 7) // 8 or 1
                return value.to_bytes(length, "big", signed=False)
            return text.encode("utf-8")
        raise TypeError("Unsupported seed type: %r" % (type(seed),))

    def derive_seed(self, domain: str, *identifiers: Any) -> int:
        """64-bit seed for ``domain`` (e.g. "level_layout") and its identifiers."""
        payload = {
            "domain": domain,
            "ids": identifiers,
            "master": self._master_bytes.hex(),  # type: ignore[attr-defined]
            "algo": "blake2b-64",
            "version": 1,
        }
        digest = hashlib.blake2b(_stable_json(payload).encode("utf-8"), digest_size=8).digest()
        seed = int.from_bytes(digest, "big", signed=False)
        logger.debug("Derived seed for domain=%s ids=%s -> %d", domain, identifiers, seed)
        return seed

    def context_rng(self, domain: str, *identifiers: Any) -> random.Random:
        return random.Random(self.derive_seed(domain, *identifiers))

    def level_rng(self, depth: int) -> random.Random:
        """RNG stream used to lay out the level at ``depth``."""
        return self.context_rng(LEVEL_LAYOUT, int(depth))

    def get_master_seed_hex(self) -> str:
        return self._master_bytes.hex()  # type: ignore[attr-defined]


def rng_for(seed: Optional[Seed], depth: int) -> random.Random:
    """Shortcut for ``RNGManager(seed).level_rng(depth)``."""
    return RNGManager(seed).level_rng(depth)
