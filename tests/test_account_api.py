from goshop.version import API_PREFIX
from conftest import product_id, signup


def test_account_requires_sign_in(client):
    for path in ("addresses", "payment-methods", "favorites", "notifications"):
        r = client.get(f"{API_PREFIX}/account/{path}")
        assert r.status_code == 401
        assert r.get_json()["message"] == "unauthorized"


def test_address_lifecycle(client):
    signup(client, location="7 Palm Ave")
    home = client.get(f"{API_PREFIX}/account/addresses").get_json()["data"]["addresses"][0]
    assert home["is_default"] is True

    r = client.post(f"{API_PREFIX}/account/addresses", json={"street": "1 Work Rd", "label": "Work"})
    assert r.status_code == 201
    work = r.get_json()["data"]["address"]

    r = client.patch(f"{API_PREFIX}/account/addresses/{work['id']}", json={"city": "Tema"})
    assert r.get_json()["data"]["address"]["city"] == "Tema"

    r = client.delete(f"{API_PREFIX}/account/addresses/{home['id']}")
    assert r.status_code == 400

    client.post(f"{API_PREFIX}/account/addresses/{work['id']}/default")
    listed = client.get(f"{API_PREFIX}/account/addresses").get_json()["data"]["addresses"]
    assert listed[0]["id"] == work["id"]
    assert client.get(f"{API_PREFIX}/auth/me").get_json()["data"]["user"]["location"] == "1 Work Rd"

    assert client.delete(f"{API_PREFIX}/account/addresses/{home['id']}").status_code == 204
    assert client.delete(f"{API_PREFIX}/account/addresses/{home['id']}").status_code == 404


def test_payment_methods(client):
    signup(client)
    r = client.post(f"{API_PREFIX}/account/payment-methods", json={"kind": "bitcoin"})
    assert r.status_code == 422

    card = client.post(
        f"{API_PREFIX}/account/payment-methods", json={"kind": "card", "label": "Visa"}
    ).get_json()["data"]["payment_method"]
    momo = client.post(
        f"{API_PREFIX}/account/payment-methods", json={"kind": "mobile_money"}
    ).get_json()["data"]["payment_method"]
    assert card["is_default"] and not momo["is_default"]

    assert client.delete(f"{API_PREFIX}/account/payment-methods/{card['id']}").status_code == 204
    methods = client.get(f"{API_PREFIX}/account/payment-methods").get_json()["data"]["payment_methods"]
    assert [(m["id"], m["is_default"]) for m in methods] == [(momo["id"], True)]


def test_favorites(client, store):
    signup(client)
    rice = product_id(store, "Local Red Rice")
    r = client.post(f"{API_PREFIX}/account/favorites", json={"product_id": rice})
    assert r.status_code == 201
    assert client.post(f"{API_PREFIX}/account/favorites", json={"product_id": "nope"}).status_code == 404

    favs = client.get(f"{API_PREFIX}/account/favorites").get_json()["data"]["favorites"]
    assert [f["name"] for f in favs] == ["Local Red Rice"]

    assert client.delete(f"{API_PREFIX}/account/favorites/{rice}").status_code == 204
    assert client.get(f"{API_PREFIX}/account/favorites").get_json()["data"]["favorites"] == []


def test_mark_notifications_read(client, app):
    from goshop.extensions import shop
    from goshop.models import Notification

    user_id = signup(client).get_json()["data"]["user"]["id"]
    user = shop().store.get_user(user_id)
    user.notifications.append(Notification(order_id="M-1", kind="placed", message="Order #M-1 has been placed"))

    assert client.get(f"{API_PREFIX}/account/notifications").get_json()["data"]["unread"] == 1
    client.post(f"{API_PREFIX}/account/notifications/read")
    data = client.get(f"{API_PREFIX}/account/notifications").get_json()["data"]
    assert data["unread"] == 0
    assert data["notifications"][0]["read"] is True
