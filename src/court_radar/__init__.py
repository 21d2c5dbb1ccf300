"""Court Radar prospecting service.

This package backs a map-centric sales dashboard for a sports-court
resurfacing business: canonical client, lead, competitor and SEO data,
plus the radar-sweep scan that discovers residential court prospects.
"""

__version__ = "0.1.0"
