from typing import NamedTuple
from enum import Enum
import resource

# --
# # Resource limits
#
# Connections are handled without any cap, each one holding a file
# descriptor, so the server raises its soft open-files limit on startup.


class LimitType(Enum):
	Files = resource.RLIMIT_NOFILE


# Darwin reports hard limits that are too high to be set, so we cap them.
REASONABLE_LIMITS: dict[LimitType, int] = {
	LimitType.Files: 10 * 10240,
}


class Limit(NamedTuple):
	type: LimitType
	soft: int
	hard: int


def limit(scope: LimitType) -> Limit:
	return Limit(scope, *resource.getrlimit(scope.value))


def unlimit(
	scope: LimitType, ratio: float = 1.0, *, maximum: int | None = 0
) -> int | bool:
	"""Raises the soft limit for the given scope towards its hard limit,
	returning the new soft limit, or `False` when it could not be changed."""
	lm = limit(scope)
	if lm.soft == resource.RLIM_INFINITY:
		return lm.soft
	hard: int = lm.hard
	maximum = REASONABLE_LIMITS.get(scope) if maximum == 0 else maximum
	if hard == resource.RLIM_INFINITY:
		if not maximum:
			return False
		hard = maximum
	target = int(lm.soft + ratio * (hard - lm.soft))
	if maximum:
		target = min(maximum, target)
	if target <= lm.soft:
		return lm.soft
	try:
		resource.setrlimit(scope.value, (target, lm.hard))
		return target
	except ValueError:
		return False
	except OSError:
		return False


# EOF
