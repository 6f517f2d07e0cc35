"""Default resort configuration."""

from snowtrack.config.schema import ResortConfig

DEFAULT_RESORT = ResortConfig(
    name="Revelstoke Mountain Resort",
    slug="revelstoke",
    timezone="America/Vancouver",
    snow_report_url="https://www.revelstokemountainresort.com/mountain/conditions/snow-report/",
)
