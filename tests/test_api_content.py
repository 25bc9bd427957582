import uuid
from datetime import date

from baronda.models.admin_log import AdminLog
from baronda.models.notification import ALL_USERS, Notification
from baronda.models.report import Report
from baronda.models.schedule import Schedule, ScheduleStatus
from baronda.models.staff import StaffRole

from conftest import auth_header, make_staff, make_user


def test_health(client):
    resp = client.get("/health")

    assert resp.json() == {"status": "ok", "database": "connected"}


def test_anonymous_report_is_triaged(client, db, fake_triage):
    resp = client.post("/reports", json={"report_text": "Motor dicuri di pos 2", "category": "theft"})

    assert resp.status_code == 201
    body = resp.json()
    assert body["reporter_name"] == "Anonim"
    assert body["threat_level"] == "high"
    assert body["triage_reason"] == "Ada pencurian."
    assert "Kategori: theft" in fake_triage.prompts[0]


def test_report_survives_triage_failure(client, db, fake_triage):
    fake_triage.fail = True

    resp = client.post("/reports", json={"report_text": "Lampu jalan mati"})

    assert resp.status_code == 201
    assert resp.json()["threat_level"] is None
    assert db.query(Report).count() == 1


def test_reply_notifies_and_emails_reporter(client, db, outbox, fake_triage):
    user = make_user(db)
    petugas = make_staff(db)
    report_id = client.post(
        "/reports", json={"report_text": "Ada orang mencurigakan"}, headers=auth_header(user)
    ).json()["id"]

    resp = client.post(f"/reports/{report_id}/replies", json={"message": "Segera kami cek."}, headers=auth_header(petugas))

    assert resp.status_code == 200
    report = client.get("/reports", headers=auth_header(petugas)).json()[0]
    assert report["status"] == "in_progress"
    assert report["replies"][0]["replier_role"] == "Petugas"
    assert db.query(Notification).filter(Notification.recipient == user.id).count() == 1
    assert "Segera kami cek." in outbox.to("warga@example.com")[-1].html
    mine = client.get("/reports/mine", headers=auth_header(user)).json()
    assert [r["id"] for r in mine] == [report_id]


def test_residents_cannot_list_all_reports(client, db):
    user = make_user(db)

    assert client.get("/reports", headers=auth_header(user)).status_code == 401


def test_only_resolved_reports_can_be_deleted(client, db, fake_triage):
    admin = make_staff(db, email="admin@example.com", role=StaffRole.admin)
    report_id = client.post("/reports", json={"report_text": "Pagar rusak"}).json()["id"]
    headers = auth_header(admin)

    assert client.delete(f"/reports/{report_id}", headers=headers).status_code == 400
    client.patch(f"/reports/{report_id}/status", json={"status": "resolved"}, headers=headers)
    assert client.delete(f"/reports/{report_id}", headers=headers).status_code == 204
    assert db.query(AdminLog).filter(AdminLog.action == "report.delete").count() == 1


def test_schedule_check_in_over_http(client, db):
    admin = make_staff(db, email="admin@example.com", role=StaffRole.admin)
    petugas = make_staff(db)

    created = client.post(
        "/schedules",
        json={"date": "2026-06-15", "time": "22:00 - 04:00", "officer_id": petugas.id, "area": "Pos 1"},
        headers=auth_header(admin),
    )
    assert created.status_code == 201
    schedule_id = created.json()["id"]

    token = client.post(f"/schedules/{schedule_id}/token", headers=auth_header(admin)).json()["token"]
    resp = client.post(f"/schedules/{schedule_id}/check-in", json={"token": token}, headers=auth_header(petugas))

    assert resp.status_code == 200
    mine = client.get("/schedules/mine", headers=auth_header(petugas)).json()
    assert mine[0]["status"] == "In Progress"

    done = client.post(f"/schedules/{schedule_id}/status", json={"status": "Completed"}, headers=auth_header(petugas))
    assert done.status_code == 200


def test_officer_reports_absence(client, db):
    petugas = make_staff(db)
    schedule = Schedule(
        id=str(uuid.uuid4()),
        date=date(2026, 6, 20),
        time="22:00 - 04:00",
        officer_id=petugas.id,
        officer_name=petugas.name,
        area="Pos 2",
        status=ScheduleStatus.pending.value,
    )
    db.add(schedule)
    db.commit()

    resp = client.post(
        f"/schedules/{schedule.id}/status", json={"status": "Izin", "reason": "Acara keluarga"}, headers=auth_header(petugas)
    )

    assert resp.status_code == 200
    db.refresh(schedule)
    assert schedule.status == "Izin"


def test_dues_recorded_by_staff(client, db):
    petugas = make_staff(db)
    user = make_user(db)

    resp = client.post(
        "/finance/dues",
        json={"user_id": user.id, "amount": 20000, "month": "Juni", "year": 2026},
        headers=auth_header(petugas),
    )

    assert resp.status_code == 201
    assert resp.json()["payer_name"] == "Siti Aminah"
    assert resp.json()["recorded_by_name"] == "Budi Santoso"
    assert len(client.get("/finance/dues/mine", headers=auth_header(user)).json()) == 1
    assert client.post("/finance/dues", json={"user_id": user.id, "amount": 1, "month": "Juni", "year": 2026}, headers=auth_header(user)).status_code == 401


def test_honorarium_by_treasurer_only(client, db):
    petugas = make_staff(db)
    bendahara = make_staff(db, email="bendahara@example.com", role=StaffRole.bendahara)
    payload = {"staff_id": petugas.id, "period": "Juni 2026", "amount": 150000}

    assert client.post("/finance/honorariums", json=payload, headers=auth_header(petugas)).status_code == 403
    created = client.post("/finance/honorariums", json=payload, headers=auth_header(bendahara))
    assert created.status_code == 201
    assert created.json()["status"] == "Tertunda"

    honor_id = created.json()["id"]
    updated = client.patch(f"/finance/honorariums/{honor_id}", json={"status": "Dibayarkan"}, headers=auth_header(bendahara))
    assert updated.json()["status"] == "Dibayarkan"
    assert len(client.get("/finance/honorariums/mine", headers=auth_header(petugas)).json()) == 1


def test_announcements_filtered_by_audience(client, db):
    admin = make_staff(db, email="admin@example.com", role=StaffRole.admin)
    headers = auth_header(admin)
    client.post("/announcements", json={"title": "Rapat", "content": "Rapat RT", "target": "all"}, headers=headers)
    client.post("/announcements", json={"title": "Piket", "content": "Piket petugas", "target": "staff"}, headers=headers)

    for_users = client.get("/announcements", params={"audience": "users"}).json()

    assert [a["title"] for a in for_users] == ["Rapat"]
    assert len(client.get("/announcements").json()) == 2
    assert db.query(Notification).filter(Notification.recipient == ALL_USERS).count() == 1


def test_announcement_reactions(client, db):
    admin = make_staff(db, email="admin@example.com", role=StaffRole.admin)
    user = make_user(db)
    ann_id = client.post(
        "/announcements", json={"title": "Rapat", "content": "Rapat RT"}, headers=auth_header(admin)
    ).json()["id"]

    client.post(f"/announcements/{ann_id}/react", json={"reaction": "like"}, headers=auth_header(user))
    resp = client.post(f"/announcements/{ann_id}/react", json={"reaction": "dislike"}, headers=auth_header(user))

    assert resp.json()["likes"] == 1
    assert resp.json()["dislikes"] == 1


def test_notifications_include_broadcasts(client, db):
    admin = make_staff(db, email="admin@example.com", role=StaffRole.admin)
    user = make_user(db)
    client.post("/notifications", json={"recipient": "all_users", "title": "Info", "message": "Semua warga"}, headers=auth_header(admin))
    personal = client.post(
        "/notifications", json={"recipient": user.id, "title": "Halo", "message": "Untuk Anda"}, headers=auth_header(admin)
    ).json()

    mine = client.get("/notifications", headers=auth_header(user)).json()
    assert {n["title"] for n in mine} == {"Info", "Halo"}

    read = client.post(f"/notifications/{personal['id']}/read", headers=auth_header(user))
    assert read.json()["read"] is True
    broadcast_id = next(n["id"] for n in mine if n["title"] == "Info")
    assert client.post(f"/notifications/{broadcast_id}/read", headers=auth_header(user)).status_code == 403
    assert client.get("/notifications", headers=auth_header(admin)).json() == []


def test_emergency_contacts_public_read_admin_write(client, db):
    admin = make_staff(db, email="admin@example.com", role=StaffRole.admin)
    payload = {"name": "Polsek Luwuk", "number": "110", "type": "police"}

    assert client.post("/emergency-contacts", json=payload).status_code == 401
    assert client.post("/emergency-contacts", json=payload, headers=auth_header(admin)).status_code == 201
    assert client.get("/emergency-contacts").json()[0]["number"] == "110"


def test_maintenance_setting(client, db):
    admin = make_staff(db, email="admin@example.com", role=StaffRole.admin)

    client.put("/settings/maintenance_mode", json={"value": True}, headers=auth_header(admin))

    assert client.get("/settings/maintenance_mode").json()["value"] is True
    assert client.get("/settings/unknown").status_code == 404


def test_shortlink_redirect_counts_clicks(client, db):
    admin = make_staff(db, email="admin@example.com", role=StaffRole.admin)
    client.post("/shortlinks", json={"slug": "rapat", "target_url": "https://example.com/rapat"}, headers=auth_header(admin))

    resp = client.get("/go/rapat", follow_redirects=False)

    assert resp.status_code == 307
    assert resp.headers["location"] == "https://example.com/rapat"
    assert client.get("/shortlinks", headers=auth_header(admin)).json()[0]["clicks"] == 1
    assert client.get("/go/none", follow_redirects=False).status_code == 404


def test_admin_log_lists_actions(client, db):
    admin = make_staff(db, email="admin@example.com", role=StaffRole.admin)
    user = make_user(db)
    client.post(f"/admin/users/{user.id}/block", json={"reason": "Spam"}, headers=auth_header(admin))

    logs = client.get("/admin/logs", headers=auth_header(admin)).json()

    assert logs[0]["action"] == "user.block"
    assert logs[0]["actor_name"] == "Budi Santoso"
