from conftest import PNG_BYTES, auth_header


def _upload(client, token):
    res = client.post(
        "/todos",
        data={"title": "pic"},
        files={"image": ("pic.png", PNG_BYTES, "image/png")},
        headers=auth_header(token),
    )
    assert res.status_code == 201, res.text
    return res.json()["image_reference"]


def test_image_is_public_and_cacheable(client, signup):
    ref = _upload(client, signup()["token"])
    res = client.get(f"/images/{ref}")
    assert res.status_code == 200
    assert res.headers["etag"] == f'"img-{ref}"'
    assert res.headers["cache-control"] == "public, max-age=31536000"


def test_conditional_fetch(client, signup):
    ref = _upload(client, signup()["token"])
    etag = client.get(f"/images/{ref}").headers["etag"]
    res = client.get(f"/images/{ref}", headers={"If-None-Match": etag})
    assert res.status_code == 304
    assert res.content == b""


def test_stale_etag_refetches(client, signup):
    ref = _upload(client, signup()["token"])
    res = client.get(f"/images/{ref}", headers={"If-None-Match": '"img-other"'})
    assert res.status_code == 200
    assert res.content == PNG_BYTES


def test_unknown_image(client):
    assert client.get("/images/424242").status_code == 404
    assert client.get("/images/not-a-number").status_code == 404


def test_wildcard_etag_on_existing_image(client, signup):
    ref = _upload(client, signup()["token"])
    assert client.get(f"/images/{ref}", headers={"If-None-Match": "*"}).status_code == 304


def test_wildcard_etag_on_unknown_image(client):
    res = client.get("/images/424242", headers={"If-None-Match": "*"})
    assert res.status_code == 404
