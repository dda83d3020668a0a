"""Pytest configuration and shared fixtures."""

import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from avs.address_models import (  # noqa: E402
    StandardizedAddress,
    ValidationResult,
    ValidationStatus,
)


# ============================================================================
# Domain objects
# ============================================================================


@pytest.fixture
def amphitheatre():
    """Fully populated standardized address."""
    return StandardizedAddress(
        street="Amphitheatre Pkwy",
        number="1600",
        city="Mountain View",
        state="CA",
        zip="94043",
        coordinates=(37.4224764, -122.0842499),
    )


@pytest.fixture
def valid_result(amphitheatre):
    return ValidationResult(address=amphitheatre, status=ValidationStatus.VALID)


# ============================================================================
# Provider payloads
# ============================================================================


@pytest.fixture
def google_geocode_payload():
    return {
        "results": [
            {
                "address_components": [
                    {"long_name": "1600", "short_name": "1600", "types": ["street_number"]},
                    {"long_name": "Amphitheatre Parkway", "short_name": "Amphitheatre Pkwy", "types": ["route"]},
                    {"long_name": "Mountain View", "short_name": "Mountain View", "types": ["locality", "political"]},
                    {"long_name": "California", "short_name": "CA", "types": ["administrative_area_level_1", "political"]},
                    {"long_name": "94043", "short_name": "94043", "types": ["postal_code"]},
                    {"long_name": "United States", "short_name": "US", "types": ["country", "political"]},
                ],
                "formatted_address": "1600 Amphitheatre Parkway, Mountain View, CA 94043, USA",
                "geometry": {
                    "location": {"lat": 37.4224764, "lng": -122.0842499},
                    "location_type": "ROOFTOP",
                },
                "place_id": "ChIJ2eUgeAK6j4ARbn5u_wAGqWA",
                "types": ["street_address"],
            }
        ],
        "status": "OK",
    }


@pytest.fixture
def geocodio_payload():
    return {
        "input": {
            "address_string": "1600 Amphitheatre Parkway, Mountain View, CA",
            "formatted_address": "1600 Amphitheatre Pkwy, Mountain View, CA 94043",
        },
        "results": [
            {
                "address_components": {
                    "number": "1600",
                    "predirectional": "",
                    "street": "Amphitheatre",
                    "suffix": "Pkwy",
                    "formatted_street": "Amphitheatre Pkwy",
                    "city": "Mountain View",
                    "county": "Santa Clara County",
                    "state": "CA",
                    "zip": "94043",
                    "country": "US",
                },
                "formatted_address": "1600 Amphitheatre Pkwy, Mountain View, CA 94043",
                "location": {"lat": 37.422408, "lng": -122.08416},
                "accuracy": 1,
                "accuracy_type": "rooftop",
                "source": "TIGER/Line dataset from the US Census Bureau",
            }
        ],
    }


@pytest.fixture
def azure_maps_payload():
    return {
        "summary": {
            "query": "1600 Amphitheatre Parkway, Mountain View, CA",
            "queryType": "NON_NEAR",
            "queryTime": 45,
            "numResults": 1,
            "fuzzyLevel": 1,
        },
        "results": [
            {
                "type": "Point Address",
                "score": 8.5,
                "matchType": "AddressPoint",
                "address": {
                    "streetNumber": "1600",
                    "streetName": "Amphitheatre Parkway",
                    "municipality": "Mountain View",
                    "countrySubdivision": "California",
                    "countrySubdivisionCode": "CA",
                    "postalCode": "94043",
                    "freeformAddress": "1600 Amphitheatre Parkway, Mountain View, CA 94043",
                    "country": "United States",
                    "countryCode": "US",
                },
                "position": {"lat": 37.4224764, "lon": -122.0842499},
            }
        ],
    }


@pytest.fixture
def google_validation_payload():
    return {
        "result": {
            "verdict": {
                "inputGranularity": "PREMISE",
                "validationGranularity": "PREMISE",
                "geocodeGranularity": "PREMISE",
                "addressComplete": True,
                "hasUnconfirmedComponents": False,
                "hasInferredComponents": False,
                "hasReplacedComponents": False,
            },
            "address": {
                "formattedAddress": "1600 Amphitheatre Pkwy, Mountain View, CA 94043, USA",
                "postalAddress": {
                    "regionCode": "US",
                    "postalCode": "94043",
                    "administrativeArea": "CA",
                    "locality": "Mountain View",
                    "addressLines": ["1600 Amphitheatre Pkwy"],
                },
            },
            "geocode": {
                "location": {"latitude": 37.4224764, "longitude": -122.0842499},
                "placeId": "ChIJ2eUgeAK6j4ARbn5u_wAGqWA",
            },
            "uspsData": {
                "standardizedAddress": {
                    "firstAddressLine": "1600 AMPHITHEATRE PKWY",
                    "cityStateZipAddressLine": "MOUNTAIN VIEW CA 94043-1351",
                    "city": "MOUNTAIN VIEW",
                    "state": "CA",
                    "zipCode": "94043",
                    "zipCodeExtension": "1351",
                },
                "dpvConfirmation": "Y",
                "county": "SANTA CLARA",
            },
        },
        "responseId": "9a1f0c1e-0000-0000-0000-000000000000",
    }
