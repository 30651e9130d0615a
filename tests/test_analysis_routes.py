"""
Integration tests for the /analysis endpoints.
"""
import json

from aiface.db.models.analysis import Analysis
from aiface.db.models.usage import UsageRecord
from aiface.services.quota_service import get_day_key


def analyze(client, image_id, headers):
    return client.post(f"/analysis/analyze/{image_id}", headers=headers)


def test_usage_status_no_usage(client, test_user, auth_headers, db):
    """Test usage status for a fresh user without creating a record."""
    response = client.get("/analysis/usage/status", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"count": 0, "limit": 5, "remaining": 5}
    db.expire_all()
    assert db.query(UsageRecord).count() == 0


def test_usage_status_unauthorized(client, db):
    response = client.get("/analysis/usage/status")
    assert response.status_code == 401


def test_usage_status_invalid_token(client, db):
    headers = {"Authorization": "Bearer invalid_token"}
    response = client.get("/analysis/usage/status", headers=headers)
    assert response.status_code == 401


def test_get_analysis_not_found(client, test_image, auth_headers):
    response = client.get(f"/analysis/{test_image.id}", headers=auth_headers)
    assert response.status_code == 404


def test_analyze_success(client, test_image, auth_headers, fake_provider):
    """Test a fresh analysis is normalized, stored and charged once."""
    response = analyze(client, test_image.id, auth_headers)

    assert response.status_code == 200
    data = response.json()

    assert data["imageId"] == test_image.id
    assert data["message"] == "A calm, balanced face with a strong jawline."
    assert data["positiveTraits"] == ["kind", "generous", "determined"]
    assert data["negativeTraits"] == ["stubborn"]
    assert data["personalityAnalysis"]["mianXiang"]["elements"] == ["wood"]
    assert data["ageHealthAnalysis"]["stressLevel"] == {"value": 0.3, "interpretation": "low"}
    assert data["beautyAnalysis"]["symmetryScore"] == 0.82
    assert data["beautyAnalysis"]["celebrityMatches"] == [
        {"name": "Jane Doe", "similarity": 0.71, "features": ["cheekbones", "eyes"]}
    ]
    assert data["confidence"] == 0.95
    assert data["usage"] == {"count": 1, "limit": 5, "remaining": 4}

    assert sorted(call[0] for call in fake_provider.calls) == ["analyze_face", "match_celebrities"]
    assert all(call[1] == "image/jpeg" for call in fake_provider.calls)


def test_analyze_then_fetch(client, test_image, auth_headers):
    """Test GET returns the stored analysis without calling the provider again."""
    analyzed = analyze(client, test_image.id, auth_headers).json()

    response = client.get(f"/analysis/{test_image.id}", headers=auth_headers)
    assert response.status_code == 200
    fetched = response.json()

    analyzed.pop("usage")
    assert fetched == analyzed

    status = client.get("/analysis/usage/status", headers=auth_headers).json()
    assert status["count"] == 1


def test_reanalyze_overwrites(client, test_image, auth_headers, fake_provider, db):
    """Test re-analysis replaces the stored result and charges again."""
    analyze(client, test_image.id, auth_headers)

    fake_provider.analysis = json.dumps({"analysis": "second look", "positive_traits": ["bold"]})
    response = analyze(client, test_image.id, auth_headers)

    assert response.status_code == 200
    assert response.json()["usage"]["count"] == 2

    fetched = client.get(f"/analysis/{test_image.id}", headers=auth_headers).json()
    assert fetched["message"] == "second look"
    assert fetched["positiveTraits"] == ["bold"]

    db.expire_all()
    assert db.query(Analysis).count() == 1


def test_analyze_quota_exceeded(client, test_user, test_image, auth_headers, fake_provider, db):
    """Test the sixth analysis of the day is rejected with 429."""
    db.add(UsageRecord(user_id=test_user.id, date=get_day_key(), count=5))
    db.commit()

    response = analyze(client, test_image.id, auth_headers)

    assert response.status_code == 429
    assert response.json() == {
        "message": "Daily analysis limit reached (5 analyses per day)",
        "limit": 5,
        "count": 5,
    }
    assert fake_provider.calls == []


def test_analyze_five_then_rejected(client, test_image, auth_headers):
    for expected in range(1, 6):
        response = analyze(client, test_image.id, auth_headers)
        assert response.status_code == 200
        assert response.json()["usage"]["count"] == expected

    response = analyze(client, test_image.id, auth_headers)
    assert response.status_code == 429
    assert response.json()["count"] == 5

    status = client.get("/analysis/usage/status", headers=auth_headers).json()
    assert status == {"count": 5, "limit": 5, "remaining": 0}


def test_analyze_provider_failure(client, test_image, auth_headers, fake_provider, db):
    """Test a failed provider call returns 500, keeps the cache and burns no quota."""
    analyze(client, test_image.id, auth_headers)

    fake_provider.analysis_error = RuntimeError("upstream timeout")
    response = analyze(client, test_image.id, auth_headers)

    assert response.status_code == 500
    body = response.json()
    assert body["message"] == "Error analyzing face"
    assert "upstream timeout" in body["error"]

    status = client.get("/analysis/usage/status", headers=auth_headers).json()
    assert status["count"] == 1

    fetched = client.get(f"/analysis/{test_image.id}", headers=auth_headers).json()
    assert fetched["message"] == "A calm, balanced face with a strong jawline."


def test_analyze_provider_failure_without_prior_analysis(client, test_image, auth_headers, fake_provider):
    fake_provider.analysis_error = RuntimeError("boom")

    assert analyze(client, test_image.id, auth_headers).status_code == 500
    assert client.get(f"/analysis/{test_image.id}", headers=auth_headers).status_code == 404


def test_analyze_celebrity_failure_degrades(client, test_image, auth_headers, fake_provider):
    """Test a failed likeness call stores an empty match list."""
    fake_provider.celebrity_error = RuntimeError("celebrity call failed")

    response = analyze(client, test_image.id, auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["beautyAnalysis"]["celebrityMatches"] == []
    assert data["positiveTraits"] == ["kind", "generous", "determined"]
    assert data["usage"]["count"] == 1


def test_analyze_free_text_response(client, test_image, auth_headers, fake_provider):
    """Test unparseable provider output still succeeds with a text-only analysis."""
    fake_provider.analysis = "This face suggests warmth and curiosity."

    response = analyze(client, test_image.id, auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "This face suggests warmth and curiosity."
    assert data["positiveTraits"] == []
    assert data["negativeTraits"] == []
    assert data["personalityAnalysis"]["facialFeatures"] == []
    assert data["confidence"] == 0.95
    assert data["usage"]["count"] == 1


def test_analyze_image_not_found(client, test_user, auth_headers, fake_provider, db):
    response = analyze(client, 9999, auth_headers)

    assert response.status_code == 404
    assert fake_provider.calls == []
    status = client.get("/analysis/usage/status", headers=auth_headers).json()
    assert status["count"] == 0


def test_analyze_other_users_image(client, other_user, test_image, fake_provider):
    """Test users cannot analyze or read images they do not own."""
    from aiface.core.security import create_access_token

    headers = {"Authorization": f"Bearer {create_access_token({'sub': str(other_user.id)})}"}

    assert analyze(client, test_image.id, headers).status_code == 404
    assert client.get(f"/analysis/{test_image.id}", headers=headers).status_code == 404
    assert fake_provider.calls == []


def test_analyze_missing_file(client, test_image, auth_headers, fake_provider):
    import os
    os.remove(test_image.path)

    response = analyze(client, test_image.id, auth_headers)
    assert response.status_code == 404
    assert fake_provider.calls == []


def test_analyze_unauthorized(client, test_image):
    assert client.post(f"/analysis/analyze/{test_image.id}").status_code == 401
