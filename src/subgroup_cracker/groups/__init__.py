"""Group arithmetic for the three families under attack."""

from subgroup_cracker.groups.montgomery import MontgomeryCurve
from subgroup_cracker.groups.multiplicative import ModPGroup
from subgroup_cracker.groups.weierstrass import WeierstrassCurve

__all__ = ["ModPGroup", "MontgomeryCurve", "WeierstrassCurve"]
