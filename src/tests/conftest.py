from __future__ import annotations

from typing import Any, Dict

import pytest


def make_article_dict(article_id: int = 1, **overrides: Any) -> Dict[str, Any]:
    data = {
        "id": article_id,
        "title": f"Starship flight {article_id}",
        "summary": f"Summary of flight {article_id}.",
        "url": f"https://spacenews.example/articles/{article_id}",
        "image_url": f"https://spacenews.example/img/{article_id}.jpg",
        "news_site": "SpaceNews",
        "published_at": "2024-06-06T12:30:45.123000Z",
        "updated_at": "2024-06-06T13:00:00Z",
        "featured": False,
    }
    data.update(overrides)
    return data


def make_envelope_dict(ids=(1, 2, 3), next=None, previous=None) -> Dict[str, Any]:
    return {
        "count": 120,
        "next": next,
        "previous": previous,
        "results": [make_article_dict(i) for i in ids],
    }


@pytest.fixture
def article_dict():
    return make_article_dict()


@pytest.fixture
def envelope_dict():
    return make_envelope_dict()
