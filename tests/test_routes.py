import requests
from sqlmodel import select

from classify import ClassifyClient, get_classify_client
from conftest import FakeHTTP
from main import app
from models import Book


def _override_client(http: FakeHTTP) -> None:
    client = ClassifyClient(base_url="http://classify.test/Classify", timeout=2, http=http)
    app.dependency_overrides[get_classify_client] = lambda: client


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/healthz").json() == {"status": "ok"}


# -------------------------------------------------------------
# Auth
# -------------------------------------------------------------
def test_register_sets_session_and_opens_library(client):
    response = client.post("/auth/register", data={"username": "carol", "password": "pw"})

    assert response.status_code == 201
    assert response.json()["username"] == "carol"
    assert "hashed_password" not in response.json()
    assert client.cookies.get("user")

    library = client.get("/")
    assert library.status_code == 200
    assert library.json() == {"books": []}


def test_register_duplicate_username(client, alice):
    response = client.post("/auth/register", data={"username": "alice", "password": "pw"})
    assert response.status_code == 400


def test_login_and_logout(client, alice):
    response = client.post("/auth/login", data={"username": "alice", "password": "wonderland"})
    assert response.status_code == 200
    assert response.json() == {"id": alice.id, "username": "alice"}

    me = client.get("/users/me")
    assert me.status_code == 200
    assert me.json()["username"] == "alice"

    client.post("/auth/logout")
    assert not client.cookies.get("user")
    assert client.get("/").status_code == 401


def test_login_failures_look_identical(client, alice):
    wrong_password = client.post("/auth/login", data={"username": "alice", "password": "nope"})
    unknown_user = client.post("/auth/login", data={"username": "mallory", "password": "nope"})

    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json()
    assert not client.cookies.get("user")


def test_protected_routes_require_session(client, alice):
    assert client.get("/").status_code == 401
    assert client.get("/search", params={"search": "1984"}).status_code == 401
    assert client.post("/addbook", data={"bookId": "123"}).status_code == 401
    assert client.post("/removebook", data={"bookId": "1"}).status_code == 401


def test_numeric_cookie_is_not_a_session(client, alice):
    client.cookies.set("user", str(alice.id))
    response = client.get("/")

    assert response.status_code == 401
    assert response.json() == {"detail": "Non authentifié"}


# -------------------------------------------------------------
# Search
# -------------------------------------------------------------
def test_search_returns_results(login_as, alice):
    client = login_as(alice)
    response = client.get("/search", params={"search": "1984"})

    assert response.status_code == 200
    assert response.json() == {
        "query": "1984",
        "results": [{"title": "1984", "author": "Orwell", "year": 1950, "owi": "123"}],
    }


def test_search_transport_error_is_server_error(login_as, alice):
    client = login_as(alice)
    _override_client(FakeHTTP(error=requests.ConnectionError("refused")))

    response = client.get("/search", params={"search": "1984"})
    assert response.status_code == 502
    assert "refused" not in response.text


def test_search_parse_error_is_server_error(login_as, alice):
    client = login_as(alice)
    _override_client(FakeHTTP({"1984": b"<html/>"}))

    assert client.get("/search", params={"search": "1984"}).status_code == 502


# -------------------------------------------------------------
# Library
# -------------------------------------------------------------
def test_addbook_creates_one_owned_entry(login_as, session, alice):
    client = login_as(alice)
    response = client.post("/addbook", data={"bookId": "123"})

    assert response.status_code == 201
    body = response.json()
    assert body["classification"] == "813"
    assert body["owi"] == "123"
    assert body["userId"] == alice.id

    books = session.exec(select(Book)).all()
    assert len(books) == 1
    assert books[0].classification == "813"
    assert books[0].userId == alice.id


def test_addbook_lookup_failure_writes_nothing(login_as, session, alice):
    client = login_as(alice)
    response = client.post("/addbook", data={"bookId": "unknown"})

    assert response.status_code == 502
    assert session.exec(select(Book)).all() == []


def test_library_sort_and_filter(login_as, session, alice, bob):
    for title, author, classification, owner in [
        ("Walden", "Thoreau", "818.3", alice),
        ("Autobiography", "Franklin", "92", alice),
        ("Edge", "Zed", "900", alice),
        ("Beloved", "Morrison", "813.54", bob),
    ]:
        session.add(Book(title=title, author=author, owi=title, classification=classification, userId=owner.id))
    session.commit()

    client = login_as(alice)

    by_class = client.get("/", params={"sort": "classification"}).json()["books"]
    assert [b["title"] for b in by_class] == ["Autobiography", "Walden", "Edge"]

    filtered = client.get("/", params={"filter": "800"}).json()["books"]
    assert [b["title"] for b in filtered] == ["Walden"]

    hostile = client.get("/", params={"sort": "title; DROP TABLE book", "filter": "1 OR 1=1"})
    assert hostile.status_code == 200
    assert [b["title"] for b in hostile.json()["books"]] == ["Autobiography", "Edge", "Walden"]


def test_library_survives_huge_filter_and_non_numeric_codes(login_as, session, alice):
    session.add(Book(title="Beloved", author="Morrison", owi="1", classification="[Fic]", userId=alice.id))
    session.add(Book(title="Walden", author="Thoreau", owi="2", classification="818.3", userId=alice.id))
    session.commit()

    client = login_as(alice)

    huge = client.get("/", params={"filter": "99999999999999999999"})
    assert huge.status_code == 200
    assert len(huge.json()["books"]) == 2

    by_class = client.get("/", params={"sort": "classification"})
    assert by_class.status_code == 200
    assert [b["classification"] for b in by_class.json()["books"]] == ["818.3", "[Fic]"]

    assert client.get("/", params={"filter": "0"}).json() == {"books": []}


def test_removebook_other_owner_is_forbidden(login_as, session, alice, bob):
    book = Book(title="Beloved", author="Morrison", owi="1", classification="813", userId=bob.id)
    session.add(book)
    session.commit()
    session.refresh(book)
    book_id = book.id

    client = login_as(alice)
    response = client.post("/removebook", data={"bookId": str(book_id)})

    assert response.status_code == 403
    assert session.exec(select(Book).where(Book.id == book_id)).first() is not None


def test_removebook_own_entry(login_as, session, alice):
    client = login_as(alice)
    added = client.post("/addbook", data={"bookId": "123"}).json()

    response = client.post("/removebook", data={"bookId": str(added["id"])})
    assert response.status_code == 200
    assert client.get("/").json() == {"books": []}


def test_removebook_missing_entry(login_as, alice):
    client = login_as(alice)
    assert client.post("/removebook", data={"bookId": "4242"}).status_code == 404
