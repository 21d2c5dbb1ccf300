"""
Court Radar Test Package.

This package contains unit tests for the Court Radar modules.

Test categories:
- test_config.py: Configuration and environment variable loading
- test_models.py: Pydantic model validation and derived fields
- test_geo.py: Point-in-polygon and screen bearing geometry
- test_scanner.py: Prospect generation and reveal ordering
- test_session.py: Timed reveal, completion and overlap handling
- test_repository.py: Seeded data source
- test_activity.py: Activity feed merging
- test_map_layers.py: Map filters and heat-map layers
- test_storage.py: Saved prospect pipeline
- test_outreach.py: Outreach email drafting
- test_api.py: HTTP API
- test_logging_utils.py: Log formatting and context
"""

__all__ = []
