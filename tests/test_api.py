"""
Tests for the HTTP API.
"""

from tests.conftest import build_swing_frames


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["service"] == "swing-scoring-api"


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["checks"]["benchmarks"] == "loaded"
    assert body["checks"]["ground_truth_players"] == 5


def test_ground_truth(client):
    response = client.get("/api/ground-truth")

    assert response.status_code == 200
    names = [p["name"] for p in response.json()["players"]]
    assert "Freddie Freeman" in names


def test_analyze(client):
    response = client.post("/api/analyze", json={"metrics": {"attack_angle": 11, "bat_speed": 72}, "level": "college"})

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["key_biomechanics"]["attack_angle"]["status"] == "optimal"


def test_analyze_empty_metrics(client):
    response = client.post("/api/analyze", json={"metrics": {}})

    assert response.status_code == 422
    assert response.json()["detail"]["step"] == "analysis"


def test_analyze_unknown_level(client):
    response = client.post("/api/analyze", json={"metrics": {"attack_angle": 11}, "level": "pro"})

    assert response.status_code == 422


def test_score_component(client):
    response = client.post("/api/score/component", json={"metric_name": "attack_angle", "value": 11})

    assert response.status_code == 200
    assert response.json()["value"] == 100.0
    assert response.json()["status"] == "optimal"


def test_score_component_missing_value(client):
    response = client.post("/api/score/component", json={"metric_name": "attack_angle", "value": None})

    assert response.status_code == 200
    assert response.json()["status"] == "N/A"
    assert response.json()["value"] == 0.0


def test_score_component_custom_range(client):
    response = client.post("/api/score/component", json={
        "metric_name": "spin_axis",
        "value": 5,
        "score_range": {"optimal": [0, 10], "developing": [-5, 15], "unit": "°"},
    })

    assert response.status_code == 200
    assert response.json()["value"] == 100.0


def test_score_component_unknown_metric(client):
    response = client.post("/api/score/component", json={"metric_name": "spin_axis", "value": 5})

    assert response.status_code == 422


def test_score_component_inverted_range(client):
    response = client.post("/api/score/component", json={
        "metric_name": "spin_axis",
        "value": 5,
        "score_range": {"optimal": [10, 0], "developing": [-5, 15]},
    })

    assert response.status_code == 422


def test_front_leg(client):
    response = client.post("/api/quality/front-leg", json={"knee_angle": 152, "ankle_angle": 12, "decel_rate": 11.5})

    assert response.status_code == 200
    body = response.json()
    assert body["overall_score"] == 100
    assert body["overall_status"] == "elite"
    assert body["recommended_drill"] is None


def test_weight_transfer(client):
    response = client.post("/api/quality/weight-transfer", json={"vertical_movement": 6, "timing_peak": 0.12, "back_foot_lift": 0.07})

    assert response.status_code == 200
    assert response.json()["overall_score"] == 73


def test_swing_mechanics_from_sub_scores(client):
    response = client.post("/api/quality/swing-mechanics", json={"direction": 95, "timing": 80, "efficiency": 50})

    assert response.status_code == 200
    assert response.json()["overall_score"] == 78.5


def test_swing_mechanics_from_raw_inputs(client):
    response = client.post("/api/quality/swing-mechanics", json={
        "attack_angle": 10, "bat_path_plane": 10, "connection_quality": 100,
    })

    body = response.json()
    assert response.status_code == 200
    assert body["component_scores"]["direction"]["value"] == 100.0
    assert body["component_scores"]["timing"]["status"] == "N/A"


def test_malformed_body(client):
    response = client.post("/api/quality/front-leg", json={"knee_angle": "straight"})

    assert response.status_code == 422


def test_sequence(client):
    response = client.post("/api/sequence", json={"pelvis_time": 180, "shoulder_time": 120})

    assert response.status_code == 200
    body = response.json()
    assert body["pelvis_shoulder_gap"] == 60
    assert body["is_proximal_to_distal"] is True


def test_validate_phases(client):
    response = client.post("/api/phases/validate", json={
        "markers": {"load_start": 900, "fire_start": 340},
        "player_name": "Freddie Freeman",
    })

    assert response.status_code == 200
    body = response.json()
    assert body["overall_pass"] is False
    assert body["score"] == 22


def test_validate_phases_unknown_player(client):
    response = client.post("/api/phases/validate", json={
        "markers": {"load_start": 900, "fire_start": 340},
        "player_name": "Babe Ruth",
    })

    assert response.status_code == 404


def test_validate_phases_missing_marker(client):
    response = client.post("/api/phases/validate", json={"markers": {"load_start": 900}})

    assert response.status_code == 422


def test_detect_phases(client):
    response = client.post("/api/phases/detect", json={"pose_frames": build_swing_frames(), "fps": 30})

    assert response.status_code == 200
    body = response.json()
    assert [p["name"] for p in body["detection"]["phases"]] == [
        "stance", "load", "stride", "fire", "contact", "follow_through",
    ]


def test_detect_phases_rejects_zero_fps(client):
    response = client.post("/api/phases/detect", json={"pose_frames": build_swing_frames(), "fps": 0})

    assert response.status_code == 422


def test_edge_cases(client):
    response = client.get("/api/phases/edge-cases")

    assert response.status_code == 200
    assert response.json()["all_passed"] is True
    assert len(response.json()["results"]) == 9
