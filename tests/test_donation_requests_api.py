"""
Tests for the donation request lifecycle over HTTP.

pending -> inprogress (confirm) -> done | canceled (finish), plus the
staff-only status override and the listing routes.
"""

import uuid

import pytest

REQUEST_BODY = {
    "recipientName": "Rahim",
    "bloodGroup": "O+",
    "recipientDistrict": "Dhaka",
    "recipientUpazila": "Savar",
    "hospitalName": "Enam Medical",
    "fullAddress": "Savar, Dhaka",
    "donationDate": "2026-11-01",
    "donationTime": "10:30",
    "requestMessage": "Urgent surgery",
}


@pytest.fixture
def requester(make_user):
    return make_user("requester@x.com", name="Rina")


@pytest.fixture
def create_request(client, requester):
    def _create(**overrides):
        response = client.post("/donation-requests", headers=requester, json={**REQUEST_BODY, **overrides})
        assert response.status_code == 200
        return response.json()["request"]

    return _create


class TestCreate:
    def test_new_request_is_pending(self, client, requester):
        response = client.post("/donation-requests", headers=requester, json=REQUEST_BODY)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Donation request created"
        request = body["request"]
        assert request["status"] == "pending"
        assert request["requesterEmail"] == "requester@x.com"
        assert request["requesterName"] == "Rina"
        assert request["donorEmail"] is None
        uuid.UUID(request["id"])

    def test_client_status_and_requester_are_ignored(self, client, requester):
        body = {**REQUEST_BODY, "status": "done", "requesterEmail": "forged@x.com"}

        request = client.post("/donation-requests", headers=requester, json=body).json()["request"]

        assert request["status"] == "pending"
        assert request["requesterEmail"] == "requester@x.com"

    def test_missing_required_field(self, client, requester):
        body = {k: v for k, v in REQUEST_BODY.items() if k != "recipientName"}

        response = client.post("/donation-requests", headers=requester, json=body)

        assert response.status_code == 400


class TestConfirm:
    def test_confirm_moves_to_inprogress_and_stamps_donor(self, client, make_user, create_request):
        request = create_request()
        donor = make_user("donor@x.com", name="Dipu")

        response = client.patch(f"/donation-requests/{request['id']}/confirm", headers=donor)

        assert response.status_code == 200
        confirmed = response.json()["request"]
        assert confirmed["status"] == "inprogress"
        assert confirmed["donorEmail"] == "donor@x.com"
        assert confirmed["donorName"] == "Dipu"
        assert confirmed["donorId"] == "uid-donor@x.com"
        assert confirmed["confirmedAt"] is not None

    def test_second_confirm_loses_and_changes_nothing(self, client, make_user, create_request):
        request = create_request()
        first = make_user("d@x.com", name="D")
        second = make_user("e@x.com", name="E")

        assert client.patch(f"/donation-requests/{request['id']}/confirm", headers=first).status_code == 200
        response = client.patch(f"/donation-requests/{request['id']}/confirm", headers=second)

        assert response.status_code == 400
        assert response.json() == {"message": "No pending donation found or already confirmed."}
        stored = client.get(f"/donation-requests/{request['id']}", headers=first).json()
        assert stored["status"] == "inprogress"
        assert stored["donorEmail"] == "d@x.com"

    def test_reconfirm_by_same_donor_is_rejected(self, client, make_user, create_request, data_access):
        request = create_request()
        donor = make_user("d@x.com")
        client.patch(f"/donation-requests/{request['id']}/confirm", headers=donor)
        before = data_access.get_donation_request(request["id"])

        response = client.patch(f"/donation-requests/{request['id']}/confirm", headers=donor)

        assert response.status_code == 400
        assert data_access.get_donation_request(request["id"]) == before

    def test_unknown_request(self, client, make_user):
        donor = make_user("d@x.com")

        response = client.patch(f"/donation-requests/{uuid.uuid4()}/confirm", headers=donor)

        assert response.status_code == 400

    def test_malformed_id(self, client, make_user):
        donor = make_user("d@x.com")

        response = client.patch("/donation-requests/not-an-id/confirm", headers=donor)

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid donation request ID"}


class TestFinish:
    @pytest.fixture
    def confirmed(self, client, make_user, create_request):
        request = create_request()
        donor = make_user("donor@x.com", name="Dipu")
        client.patch(f"/donation-requests/{request['id']}/confirm", headers=donor)
        return request["id"], donor

    def test_requester_marks_done(self, client, requester, confirmed):
        request_id, _ = confirmed

        response = client.patch(f"/donation-requests/{request_id}/finish", headers=requester, json={"status": "done"})

        assert response.status_code == 200
        assert response.json()["request"]["status"] == "done"
        assert response.json()["request"]["donorEmail"] == "donor@x.com"

    def test_cancel_clears_donor_fields(self, client, confirmed):
        request_id, donor = confirmed

        response = client.patch(f"/donation-requests/{request_id}/finish", headers=donor, json={"status": "canceled"})

        request = response.json()["request"]
        assert request["status"] == "canceled"
        assert request["donorEmail"] is None
        assert request["donorName"] is None
        assert request["confirmedAt"] is None

    def test_outsider_cannot_finish(self, client, make_user, confirmed):
        request_id, _ = confirmed
        outsider = make_user("other@x.com")

        response = client.patch(f"/donation-requests/{request_id}/finish", headers=outsider, json={"status": "done"})

        assert response.status_code == 403

    def test_differently_cased_requester_is_an_outsider(self, client, make_user, confirmed):
        request_id, _ = confirmed
        lookalike = make_user("Requester@x.com")

        response = client.patch(f"/donation-requests/{request_id}/finish", headers=lookalike, json={"status": "done"})

        assert response.status_code == 403

    def test_volunteer_can_finish(self, client, make_user, confirmed):
        request_id, _ = confirmed
        volunteer = make_user("v@x.com", role="volunteer")

        response = client.patch(f"/donation-requests/{request_id}/finish", headers=volunteer, json={"status": "done"})

        assert response.status_code == 200

    def test_finished_request_is_terminal(self, client, requester, confirmed):
        request_id, _ = confirmed
        client.patch(f"/donation-requests/{request_id}/finish", headers=requester, json={"status": "done"})

        response = client.patch(f"/donation-requests/{request_id}/finish", headers=requester, json={"status": "canceled"})

        assert response.status_code == 400

    def test_pending_request_cannot_be_finished(self, client, requester, create_request):
        request = create_request()

        response = client.patch(f"/donation-requests/{request['id']}/finish", headers=requester, json={"status": "done"})

        assert response.status_code == 400

    def test_only_done_or_canceled(self, client, requester, confirmed):
        request_id, _ = confirmed

        response = client.patch(f"/donation-requests/{request_id}/finish", headers=requester, json={"status": "pending"})

        assert response.status_code == 400


class TestStatusOverride:
    def test_regular_users_cannot_override(self, client, requester, create_request):
        request = create_request()

        response = client.patch(f"/donation-requests/{request['id']}/status", headers=requester, json={"status": "done"})

        assert response.status_code == 403

    def test_override_to_done_requires_a_donor(self, client, make_user, create_request):
        request = create_request()
        admin = make_user("boss@x.com", role="admin")

        response = client.patch(f"/donation-requests/{request['id']}/status", headers=admin, json={"status": "done"})

        assert response.status_code == 400

    def test_override_back_to_pending_clears_donor(self, client, make_user, create_request):
        request = create_request()
        donor = make_user("d@x.com")
        admin = make_user("boss@x.com", role="admin")
        client.patch(f"/donation-requests/{request['id']}/confirm", headers=donor)

        response = client.patch(f"/donation-requests/{request['id']}/status", headers=admin, json={"status": "pending"})

        assert response.status_code == 200
        assert response.json()["request"]["status"] == "pending"
        assert response.json()["request"]["donorEmail"] is None
        # Reopened requests can be claimed again.
        assert client.patch(f"/donation-requests/{request['id']}/confirm", headers=donor).status_code == 200

    def test_override_unknown_request(self, client, make_user):
        volunteer = make_user("v@x.com", role="volunteer")

        response = client.patch(f"/donation-requests/{uuid.uuid4()}/status", headers=volunteer, json={"status": "canceled"})

        assert response.status_code == 404


class TestListing:
    def test_by_requester_paginates_latest_first(self, client, requester, create_request):
        for day in ("2026-11-01", "2026-11-03", "2026-11-02"):
            create_request(donationDate=day)

        response = client.get("/donation-requests/by-requester",
                              params={"email": "requester@x.com", "page": 1, "limit": 2}, headers=requester)

        assert response.status_code == 200
        body = response.json()
        assert body["totalPages"] == 2
        assert [r["donationDate"] for r in body["requests"]] == ["2026-11-03", "2026-11-02"]

    def test_by_requester_status_filter(self, client, make_user, requester, create_request):
        first = create_request()
        create_request()
        client.patch(f"/donation-requests/{first['id']}/confirm", headers=make_user("d@x.com"))

        response = client.get("/donation-requests/by-requester",
                              params={"email": "requester@x.com", "status": "inprogress"}, headers=requester)

        assert [r["id"] for r in response.json()["requests"]] == [first["id"]]

    def test_by_requester_requires_email(self, client, requester):
        assert client.get("/donation-requests/by-requester", headers=requester).status_code == 400

    def test_by_donor(self, client, make_user, create_request):
        request = create_request()
        create_request()
        donor = make_user("d@x.com")
        client.patch(f"/donation-requests/{request['id']}/confirm", headers=donor)

        response = client.get("/donation-requests/by-donor", params={"email": "d@x.com"}, headers=donor)

        assert [r["id"] for r in response.json()] == [request["id"]]

    def test_public_lists_only_pending(self, client, make_user, requester, create_request):
        claimed = create_request()
        open_request = create_request()
        client.patch(f"/donation-requests/{claimed['id']}/confirm", headers=make_user("d@x.com"))

        response = client.get("/donation-requests/public", headers=requester)

        assert [r["id"] for r in response.json()] == [open_request["id"]]

    def test_admin_lists_everything(self, client, make_user, create_request):
        create_request()
        create_request()
        admin = make_user("boss@x.com", role="admin")

        response = client.get("/admin/donation-requests", headers=admin)

        assert response.status_code == 200
        assert len(response.json()["requests"]) == 2
        assert response.json()["totalPages"] == 1

    def test_get_unknown_request(self, client, requester):
        response = client.get(f"/donation-requests/{uuid.uuid4()}", headers=requester)

        assert response.status_code == 404
        assert response.json() == {"message": "Donation request not found"}
