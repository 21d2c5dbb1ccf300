"""Canonical seed records for the Court Radar data source.

This is the single copy of the dashboard's demo data. Every record is
validated against the models in ``court_radar.models`` when the data
source loads it.
"""

from typing import Any, Dict, List

COMMERCIAL_COURTS: List[Dict[str, Any]] = [
    {"id": 1, "name": "Camelback High School", "coords": [33.5101, -112.025], "court_type": "Tennis", "surface_status": "bright", "conditions": [], "is_client": True, "is_due": True},
    {"id": 2, "name": "Phoenix Tennis Center", "coords": [33.5312, -112.091], "court_type": "Tennis", "surface_status": "faded", "conditions": ["Multiple hairline cracks", "Surface fading near baselines"]},
    {"id": 3, "name": "Pecos Community Center", "coords": [33.3031, -111.979], "court_type": "Pickleball", "surface_status": "bright", "conditions": [], "is_client": True},
    {"id": 4, "name": "Encanto Sports Complex", "coords": [33.4735, -112.086], "court_type": "Basketball", "surface_status": "faded", "conditions": ["Worn acrylic surface", "Faded line markings"]},
    {"id": 5, "name": "Scottsdale Ranch Park", "coords": [33.582, -111.87], "court_type": "Tennis", "surface_status": "bright", "conditions": [], "is_client": True, "is_due": True},
]

LEADS: List[Dict[str, Any]] = [
    {
        "id": 101, "type": "permit", "name": "Paradise Valley Country Club Expansion",
        "coords": [33.541, -111.965], "ai_score": 9,
        "ai_summary": "High-value permit for new athletic facilities, explicitly mentioning pickleball courts. Prime opportunity.",
        "extracted_data": {"Project Type": "New Construction", "Value": "$750,000"},
        "contractor": "Pavement Perfectionists",
    },
    {
        "id": 102, "type": "news", "name": "City of Mesa Announces Park Upgrades",
        "coords": [33.415, -111.831], "ai_score": 8, "is_synced": True,
        "ai_summary": "News article details city budget approval for park renovations, including resurfacing of basketball courts.",
        "extracted_data": {"Source": "Mesa Tribune", "Status": "Budget Approved"},
        "contractor": "Sport Surfaces Inc.",
    },
    {
        "id": 103, "type": "permit", "name": "ASU Downtown Campus Rec Center",
        "coords": [33.453, -112.073], "ai_score": 7,
        "ai_summary": "Permit filed for general repairs at ASU's downtown recreational center. Potential for court work.",
        "extracted_data": {"Project Type": "Repair/Maintenance", "Value": "$50,000"},
        "contractor": "Hard-Court Pros",
    },
    {
        "id": 104, "type": "permit", "name": "Anthem Community Center",
        "coords": [33.865, -112.14], "ai_score": 9,
        "ai_summary": "Permit for new pickleball court construction.",
        "extracted_data": {"Project Type": "New Construction", "Value": "$120,000"},
        "contractor": "Asphalt Aces",
    },
]

RESIDENTIAL_PROSPECTS: List[Dict[str, Any]] = [
    {
        "id": 501, "name": "Miller Residence", "coords": [33.535, -111.958],
        "homeowner": "Robert Miller", "address": "6548 E Ironwood Dr, Paradise Valley, AZ",
        "court_type": "Tennis", "condition_score": 6.2,
        "ai_summary": "Visible wear and fading on the tennis court surface. High potential for a resurfacing lead.",
    },
    {
        "id": 502, "name": "Davis Residence", "coords": [33.529, -111.962],
        "homeowner": "Jessica Davis", "address": "6701 E Saguaro Ln, Paradise Valley, AZ",
        "court_type": "Pickleball", "condition_score": 8.8,
        "ai_summary": "Well-maintained pickleball court on a large property.",
    },
]

COMPETITORS: List[Dict[str, Any]] = [
    {"id": "comp1", "name": "Ace Resurfacing Co.", "license_number": "AZ-123456", "license_status": "Active"},
    {"id": "comp2", "name": "Sunstate Courts", "license_number": "AZ-654321", "license_status": "Active"},
    {
        "id": "comp3", "name": "C&S Sport Surfaces", "license_number": "AZ-789012", "license_status": "Suspended",
        "violations": [{"date": "07/15/2025", "description": "Failure to complete project", "resolution": "License suspended pending review"}],
    },
    {
        "id": "comp4", "name": "Pro Courts Arizona", "license_number": "AZ-345678", "license_status": "Active",
        "lawsuits": [{
            "case_number": "CV-2025-001234", "filing_date": "06/20/2025", "court": "Maricopa Superior Court",
            "description": "Breach of contract dispute with a supplier.", "status": "Active",
        }],
    },
    {"id": "comp5", "name": "Arizona Court Masters", "license_number": "N/A", "license_status": "Pending"},
]

# Grouped by competitor id, newest first within each group
COMPETITOR_EVENTS: Dict[str, List[Dict[str, Any]]] = {
    "comp1": [
        {"id": 1, "type": "License Update", "date": "2025-09-06", "summary": "Contractor license renewed with the AZ ROC.", "details": "ROC #12345 renewed for 2 years, no changes in classification."},
        {"id": 2, "type": "New Ad Campaign", "date": "2025-09-04", "summary": 'Launched a new Google Ads campaign targeting "pickleball court resurfacing Phoenix".', "details": 'Ad copy focuses on a "24-hour quote guarantee". Budget appears to be moderate.'},
        {"id": 3, "type": "SEO Ranking Change", "date": "2025-09-01", "summary": 'Ranked #3 on Google for "tennis court builders Scottsdale", up from #7.', "details": "AI Analysis: Change likely due to new blog post about post-tension concrete benefits."},
    ],
    "comp2": [
        {"id": 4, "type": "Permit Filed", "date": "2025-09-05", "summary": "Filed a commercial permit with the City of Glendale for a new multi-court facility.", "details": 'Permit #GL-2025-08-112 for "athletic court construction". Valuation: $250,000.'},
        {"id": 5, "type": "New Ad Campaign", "date": "2025-08-28", "summary": "Facebook ad campaign started, targeting homeowners in the West Valley.", "details": "Video ad showcases a recently completed backyard basketball court."},
    ],
    "comp3": [
        {"id": 6, "type": "SEO Ranking Change", "date": "2025-09-02", "summary": 'Lost ranking for "running track repair", dropping off the first page.', "details": "AI Analysis: Their website's page on track maintenance has not been updated in over a year."},
    ],
}

LEAD_EVENTS: List[Dict[str, Any]] = [
    {"id": 1, "date": "2025-09-06", "text": "New permit lead detected: 'Paradise Valley Country Club Expansion'", "prospect_id": 101},
    {"id": 2, "date": "2025-09-06", "text": "5 new residential prospects identified in Paradise Valley", "view": "ResidentialProspecting"},
    {"id": 3, "date": "2025-09-06", "text": "Client 'Camelback High School' is due for a follow-up visit.", "prospect_id": 1},
    {"id": 4, "date": "2025-09-06", "text": "News lead detected: 'City of Mesa Announces Park Upgrades'", "prospect_id": 102},
    {"id": 5, "date": "2025-09-05", "text": "Competitor 'Asphalt Aces' had a license status change.", "view": "CompetitorIntel"},
]

SEO_REPORT: Dict[str, Any] = {
    "keywords": [
        "tennis court resurfacing phoenix",
        "pickleball court construction az",
        "running track repair arizona",
    ],
    "rankings": [
        {"competitor": "Ace Resurfacing Co.", "keyword": "tennis court resurfacing phoenix", "rank": 2, "change": 1, "url": "#"},
        {"competitor": "Sunstate Courts", "keyword": "tennis court resurfacing phoenix", "rank": 5, "change": -1, "url": "#"},
        {"competitor": "C&S Sport Surfaces", "keyword": "tennis court resurfacing phoenix", "rank": 6, "change": 0, "url": "#"},
        {"competitor": "Ace Resurfacing Co.", "keyword": "pickleball court construction az", "rank": 3, "change": 0, "url": "#"},
        {"competitor": "Sunstate Courts", "keyword": "pickleball court construction az", "rank": 1, "change": 0, "url": "#"},
        {"competitor": "C&S Sport Surfaces", "keyword": "running track repair arizona", "rank": 9, "change": -2, "url": "#"},
    ],
    "history": {
        "tennis court resurfacing phoenix": {
            "labels": ["June", "July", "August", "September"],
            "datasets": [
                {"label": "Ace Resurfacing Co.", "data": [4, 3, 3, 2]},
                {"label": "Sunstate Courts", "data": [5, 5, 4, 5]},
                {"label": "C&S Sport Surfaces", "data": [6, 6, 6, 6]},
            ],
        },
        "pickleball court construction az": {
            "labels": ["June", "July", "August", "September"],
            "datasets": [
                {"label": "Ace Resurfacing Co.", "data": [3, 3, 3, 3]},
                {"label": "Sunstate Courts", "data": [1, 1, 1, 1]},
            ],
        },
        "running track repair arizona": {
            "labels": ["June", "July", "August", "September"],
            "datasets": [
                {"label": "C&S Sport Surfaces", "data": [7, 7, 7, 9]},
            ],
        },
    },
}

USER_INTEL: List[Dict[str, Any]] = [
    {"id": 1, "date": "08/12/2025", "content": "Met with the facilities manager at Scottsdale Ranch Park. They mentioned a potential budget for pickleball court conversions next year."},
    {"id": 2, "date": "08/10/2025", "content": "Asphalt Aces seems to be underbidding on smaller repair jobs. Need to watch their pricing strategy."},
]
