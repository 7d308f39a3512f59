from __future__ import annotations

from hypothesis import HealthCheck, settings

# fsync on slow disks/CI makes hypothesis think the tests are "too slow".
# That is a perf healthcheck, not a functional failure.
settings.register_profile(
    "ringlog_stable",
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
    deadline=None,
)

settings.load_profile("ringlog_stable")
