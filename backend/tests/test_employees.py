URL = "/api/v1/employees"

JPEG = ("photo.jpg", b"\xff\xd8\xff\xe0\x00\x10JFIF fake image bytes", "image/jpeg")

VALID = {
    "name": "John Doe",
    "designation": "Software Engineer",
    "hiring_date": "2020-01-15",
    "date_of_birth": "1990-05-20",
    "salary": "50000.00",
}


def create(client, headers, photo=JPEG, **overrides):
    files = {"photo": photo} if photo else None
    return client.post(URL, data={**VALID, **overrides}, files=files, headers=headers)


def test_create_employee(client, auth_headers, upload_dir):
    resp = create(client, auth_headers)
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Employee created successfully"
    data = body["data"]
    assert data["name"] == "John Doe"
    assert data["age"] == 35
    assert data["salary"] == 50000.0
    assert data["photo_path"] == f"employee-{data['id']}.jpg"
    assert (upload_dir / data["photo_path"]).read_bytes() == JPEG[1]


def test_photo_required(client, auth_headers):
    resp = create(client, auth_headers, photo=None)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Photo is required"


def test_photo_must_be_jpeg(client, auth_headers):
    resp = create(client, auth_headers, photo=("photo.png", b"\x89PNG", "image/png"))
    assert resp.status_code == 400
    body = resp.json()
    assert body["message"] == "Invalid file type. Only JPEG images are allowed."
    assert body["error"]["code"] == "FILE_UPLOAD_ERROR"


def test_too_young(client, auth_headers):
    resp = create(client, auth_headers, date_of_birth="2010-01-01")
    assert resp.status_code == 400
    assert resp.json()["message"] == "Employee must be at least 18 years old"


def test_too_old(client, auth_headers):
    resp = create(client, auth_headers, date_of_birth="1950-01-01", hiring_date="1990-01-01")
    assert resp.status_code == 400
    assert resp.json()["message"] == "Employee must be 70 years old or younger"


def test_hiring_date_in_future(client, auth_headers):
    resp = create(client, auth_headers, hiring_date="2026-03-01")
    assert resp.status_code == 400
    assert resp.json()["message"] == "Hiring date must be in the past or today"


def test_hired_before_eighteen(client, auth_headers):
    resp = create(client, auth_headers, date_of_birth="1990-05-20", hiring_date="2008-05-19")
    assert resp.status_code == 400
    assert resp.json()["message"] == "Employee must be at least 18 years old at the time of hiring"


def test_field_validation(client, auth_headers, upload_dir):
    resp = create(client, auth_headers, name="J", salary="-5")
    assert resp.status_code == 422
    fields = {e["field"] for e in resp.json()["error"]["details"]["errors"]}
    assert fields == {"name", "salary"}
    assert not upload_dir.exists() or not any(upload_dir.iterdir())


def test_get_and_list(client, auth_headers, make_employee):
    make_employee(name="Alice Adams")
    bob = make_employee(name="Bob Brown")

    one = client.get(f"{URL}/{bob}", headers=auth_headers)
    assert one.status_code == 200
    assert one.json()["data"]["name"] == "Bob Brown"

    listed = client.get(URL, params={"name": "ali", "sortBy": "name", "sortOrder": "asc"}, headers=auth_headers).json()
    assert [e["name"] for e in listed["data"]] == ["Alice Adams"]
    assert listed["meta"]["total"] == 1


def test_get_missing(client, auth_headers):
    resp = client.get(f"{URL}/999", headers=auth_headers)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Employee not found"


def test_update_recomputes_age(client, auth_headers, make_employee):
    employee_id = make_employee()
    resp = client.put(
        f"{URL}/{employee_id}",
        data={"designation": "Lead Engineer", "date_of_birth": "1980-02-09"},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["designation"] == "Lead Engineer"
    # Birthday is tomorrow relative to the pinned clock
    assert data["age"] == 45


def test_update_needs_a_field(client, auth_headers, make_employee):
    employee_id = make_employee()
    resp = client.put(f"{URL}/{employee_id}", headers=auth_headers)
    assert resp.status_code == 422
    assert resp.json()["message"] == "At least one field must be provided for update"


def test_update_photo(client, auth_headers, make_employee, upload_dir):
    employee_id = make_employee()
    new_photo = ("new.jpg", b"\xff\xd8new", "image/jpeg")
    resp = client.put(f"{URL}/{employee_id}", files={"photo": new_photo}, headers=auth_headers)
    assert resp.status_code == 200
    assert (upload_dir / f"employee-{employee_id}.jpg").read_bytes() == b"\xff\xd8new"
