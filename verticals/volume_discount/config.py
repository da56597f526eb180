"""Volume discount vertical configuration."""

from dataclasses import dataclass
import os

from core.discounts.sync import CONFIGURATION_KEY


@dataclass(frozen=True)
class VolumeDiscountConfig:
    """Where the function reads its configuration from, and how the editor labels it."""

    namespace: str = "$app:cart-goal"
    key: str = CONFIGURATION_KEY
    discount_name: str = "Cart Goal"

    @classmethod
    def default(cls) -> "VolumeDiscountConfig":
        return cls()

    @classmethod
    def from_env(cls, prefix: str = "VOLUME_DISCOUNT_") -> "VolumeDiscountConfig":
        """Create config from environment variables.

        Example: VOLUME_DISCOUNT_NAMESPACE=$app:bulk-savings
        """
        overrides = {}
        for name in ("namespace", "key", "discount_name"):
            value = os.getenv(f"{prefix}{name.upper()}")
            if value:
                overrides[name] = value

        return cls(**overrides)


config = VolumeDiscountConfig.from_env()
