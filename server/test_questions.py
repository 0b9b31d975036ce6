"""Tests for question, answer, comment and tag endpoints."""

from conftest import client, make_account, make_question, repo


# --- Health / meta ---


def test_root():
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"


# --- Questions ---


def test_create_question(events):
    r = make_question(tags=[{"name": "python"}, {"name": "sqlite"}])
    assert r.status_code == 200
    d = r.json()
    assert d["title"] == "Test"
    assert [t["name"] for t in d["tags"]] == ["python", "sqlite"]
    assert d["answers"] == []
    assert d["up_votes"] == [] and d["down_votes"] == []
    assert events[-1][0] == "questionUpdate"
    assert events[-1][1]["id"] == d["id"]


def test_create_question_accepts_tag_names():
    r = make_question(tags=["python"])
    assert r.status_code == 200
    assert r.json()["tags"][0]["name"] == "python"


def test_tags_are_deduplicated():
    make_question(tags=[{"name": "python"}, {"name": "python"}])
    make_question(tags=[{"name": "python"}])
    assert repo.count("tags") == 1


def test_create_question_missing_fields():
    r = client.post("/questions", json={"title": "x"})
    assert r.status_code == 400
    assert "error" in r.json()


def test_create_question_blank_title():
    r = make_question(title="   ")
    assert r.status_code == 400


def test_create_question_needs_a_tag():
    r = make_question(tags=[])
    assert r.status_code == 400


def test_create_question_links_account():
    make_account("tester")
    qid = make_question().json()["id"]
    account = repo.find_one("accounts", username="tester")
    assert account["questions"] == [qid]


def test_list_questions_newest():
    make_question(title="old", ask_date_time="2024-01-01T00:00:00Z")
    make_question(title="new", ask_date_time="2024-02-01T00:00:00Z")
    r = client.get("/questions")
    assert r.status_code == 200
    assert [q["title"] for q in r.json()] == ["new", "old"]


def test_list_questions_active():
    old = make_question(title="old", ask_date_time="2024-01-01T00:00:00Z").json()["id"]
    make_question(title="new", ask_date_time="2024-02-01T00:00:00Z")
    client.post(f"/questions/{old}/answers", json={"text": "a", "ans_by": "bo"})
    r = client.get("/questions?order=active")
    assert [q["title"] for q in r.json()] == ["old", "new"]


def test_list_questions_unanswered():
    answered = make_question(title="answered").json()["id"]
    make_question(title="open")
    client.post(f"/questions/{answered}/answers", json={"text": "a", "ans_by": "bo"})
    r = client.get("/questions?order=unanswered")
    assert [q["title"] for q in r.json()] == ["open"]


def test_list_questions_most_viewed():
    make_question(title="seen", ask_date_time="2024-01-01T00:00:00Z")
    popular = make_question(title="popular", ask_date_time="2023-01-01T00:00:00Z")
    pid = popular.json()["id"]
    client.get(f"/questions/{pid}?username=ann")
    r = client.get("/questions?order=mostViewed")
    assert [q["title"] for q in r.json()] == ["popular", "seen"]


def test_list_questions_bad_order():
    r = client.get("/questions?order=loudest")
    assert r.status_code == 400


def test_list_questions_search():
    make_question(title="about bugs", tags=["bug"])
    make_question(title="app crash", tags=["ui"])
    make_question(title="other", tags=["ui"])
    r = client.get("/questions", params={"search": "[bug] crash"})
    assert sorted(q["title"] for q in r.json()) == ["about bugs", "app crash"]


def test_list_questions_asked_by():
    make_question(title="mine", asked_by="ann")
    make_question(title="theirs", asked_by="bo")
    r = client.get("/questions?asked_by=ann")
    assert [q["title"] for q in r.json()] == ["mine"]


def test_get_question_adds_view(events):
    qid = make_question().json()["id"]
    client.get(f"/questions/{qid}?username=ann")
    r = client.get(f"/questions/{qid}?username=ann")
    assert r.status_code == 200
    assert r.json()["views"] == ["ann"]
    assert events[-1][0] == "viewsUpdate"


def test_get_question_requires_username():
    qid = make_question().json()["id"]
    assert client.get(f"/questions/{qid}").status_code == 400
    assert client.get(f"/questions/{qid}?username=").status_code == 400


def test_get_question_not_found():
    r = client.get("/questions/9999?username=ann")
    assert r.status_code == 404
    assert r.json()["error"] == "Question not found"


# --- Votes ---


def test_upvote(events):
    qid = make_question().json()["id"]
    r = client.post(f"/questions/{qid}/upvote", json={"username": "ann"})
    assert r.status_code == 200
    assert r.json() == {
        "msg": "Question upvoted successfully",
        "up_votes": ["ann"],
        "down_votes": [],
    }
    assert events[-1] == (
        "voteUpdate", {"qid": qid, "up_votes": ["ann"], "down_votes": []},
    )


def test_upvote_toggle_cancels():
    qid = make_question().json()["id"]
    client.post(f"/questions/{qid}/upvote", json={"username": "ann"})
    r = client.post(f"/questions/{qid}/upvote", json={"username": "ann"})
    assert r.json()["msg"] == "Upvote cancelled successfully"
    assert r.json()["up_votes"] == []


def test_downvote_replaces_upvote():
    qid = make_question().json()["id"]
    client.post(f"/questions/{qid}/upvote", json={"username": "ann"})
    r = client.post(f"/questions/{qid}/downvote", json={"username": "ann"})
    assert r.json()["up_votes"] == []
    assert r.json()["down_votes"] == ["ann"]
    stored = repo.get("questions", qid)
    assert stored["down_votes"] == ["ann"]


def test_vote_missing_username():
    qid = make_question().json()["id"]
    r = client.post(f"/questions/{qid}/upvote", json={})
    assert r.status_code == 400


def test_vote_nonexistent_question():
    r = client.post("/questions/9999/downvote", json={"username": "ann"})
    assert r.status_code == 404


# --- Answers ---


def test_create_answer(events):
    make_account("bo")
    qid = make_question().json()["id"]
    r = client.post(f"/questions/{qid}/answers", json={"text": "Try this", "ans_by": "bo"})
    assert r.status_code == 200
    aid = r.json()["id"]
    assert repo.get("questions", qid)["answers"] == [aid]
    assert repo.find_one("accounts", username="bo")["answers"] == [aid]
    assert events[-1][0] == "answerUpdate"
    assert events[-1][1]["qid"] == qid


def test_newest_answer_first():
    qid = make_question().json()["id"]
    a1 = client.post(f"/questions/{qid}/answers", json={"text": "1", "ans_by": "bo"}).json()["id"]
    a2 = client.post(f"/questions/{qid}/answers", json={"text": "2", "ans_by": "bo"}).json()["id"]
    assert repo.get("questions", qid)["answers"] == [a2, a1]


def test_answer_nonexistent_question():
    r = client.post("/questions/9999/answers", json={"text": "x", "ans_by": "bo"})
    assert r.status_code == 404


def test_answer_missing_text():
    qid = make_question().json()["id"]
    r = client.post(f"/questions/{qid}/answers", json={"ans_by": "bo"})
    assert r.status_code == 400


# --- Comments ---


def test_comment_on_question(events):
    qid = make_question().json()["id"]
    r = client.post(
        f"/questions/{qid}/comments", json={"text": "Nice", "comment_by": "cy"},
    )
    assert r.status_code == 200
    assert r.json()["comment_by"] == "cy"
    event, payload = events[-1]
    assert event == "commentUpdate"
    assert payload["type"] == "question"
    assert payload["result"]["comments"][0]["text"] == "Nice"


def test_comment_on_answer():
    qid = make_question().json()["id"]
    aid = client.post(f"/questions/{qid}/answers", json={"text": "a", "ans_by": "bo"}).json()["id"]
    r = client.post(f"/answers/{aid}/comments", json={"text": "+1", "comment_by": "cy"})
    assert r.status_code == 200
    question = client.get(f"/questions/{qid}?username=ann").json()
    assert question["answers"][0]["comments"][0]["text"] == "+1"


def test_comment_on_missing_answer():
    r = client.post("/answers/9999/comments", json={"text": "x", "comment_by": "cy"})
    assert r.status_code == 404


# --- Tags ---


def test_tags_with_counts():
    make_question(tags=["alpha", "beta"])
    make_question(tags=["alpha"])
    r = client.get("/tags")
    assert r.status_code == 200
    counts = {t["name"]: t["qcnt"] for t in r.json()}
    assert counts == {"alpha": 2, "beta": 1}


def test_get_tag_by_name():
    make_question(tags=[{"name": "alpha", "description": "first"}])
    r = client.get("/tags/alpha")
    assert r.status_code == 200
    assert r.json()["description"] == "first"
    assert client.get("/tags/omega").status_code == 404


# --- Stats ---


def test_stats():
    make_question()
    d = client.get("/stats").json()
    assert d["total_questions"] == 1
    assert d["total_tags"] == 1
    assert d["total_threads"] == 0
