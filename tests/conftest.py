import os
import sys
import pytest

# Ensure project root is on sys.path for imports like `core.*`
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from models.sources import TechJSONRecord, TechJSONDocument


@pytest.fixture
def wordpress_record():
    return TechJSONRecord(
        name="WordPress",
        categories=["1", "11"],
        cookies={"wp-settings-1": ""},
        headers={"X-Pingback": "/xmlrpc\\.php$", "Link": "rel=\"https://api\\.w\\.org/\""},
        meta={"generator": "^WordPress ?([\\d.]+)?"},
        html=["<link rel=[\"']stylesheet[\"'] [^>]+/wp-(?:content|includes)/"],
        scripts=["/wp-(?:content|includes)/"],
        url=[],
        website="https://wordpress.org",
        implies=["PHP", "MySQL"],
    )


@pytest.fixture
def sample_document(wordpress_record):
    return TechJSONDocument(
        technologies={
            "WordPress": wordpress_record,
            "Django": TechJSONRecord(name="Django", categories=["18"], html=["csrfmiddlewaretoken"]),
            "Mystery": TechJSONRecord(name="Mystery", categories=["999"]),
        },
        categories={"1": "CMS", "11": "Blogs", "18": "Web frameworks"},
    )
