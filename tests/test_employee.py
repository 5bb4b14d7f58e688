from datetime import timedelta

from app.core.clock import utcnow


def _flight_body(number="ma900", **extra):
    departure = (utcnow() + timedelta(days=5)).replace(microsecond=0)
    body = {
        "flightNumber": number,
        "airline": "MacAirlines",
        "aircraft": "Boeing 737-800",
        "origin": "Chennai (MAA)",
        "destination": "Delhi (DEL)",
        "departureTime": departure.isoformat(),
        "arrivalTime": (departure + timedelta(minutes=165)).isoformat(),
        "basePrice": "6200.00",
        "gate": "B3",
    }
    body.update(extra)
    return body


def test_create_flight_builds_default_seat_map(client, employee, auth_headers):
    r = client.post("/api/v1/employee/flights", json=_flight_body(), headers=auth_headers(employee))
    assert r.status_code == 200, r.text
    flight = r.json()
    assert flight["flightNumber"] == "MA900"
    assert flight["totalSeats"] == 162
    assert flight["availableSeats"] == 162
    assert flight["duration"] == 165

    seats = client.get(f"/api/v1/flights/{flight['id']}/seats").json()
    assert len(seats) == 162
    assert {s["seatClass"] for s in seats} == {"first", "business", "economy"}
    assert seats[-1]["seatNumber"] == "28F"


def test_create_flight_with_custom_layout(client, employee, auth_headers):
    layout = [
        {"rowCount": 2, "seatClass": "business", "columns": "ACDF", "priceDelta": "2000.00"},
        {"rowCount": 10, "seatClass": "economy"},
    ]
    r = client.post("/api/v1/employee/flights", json=_flight_body(seatLayout=layout, totalSeats=68),
                    headers=auth_headers(employee))
    assert r.status_code == 200, r.text
    assert r.json()["totalSeats"] == 68

    r = client.post("/api/v1/employee/flights", json=_flight_body("MA901", seatLayout=layout, totalSeats=100),
                    headers=auth_headers(employee))
    assert r.status_code == 400
    assert r.json()["detail"]["code"] == "validation_error"


def test_duplicate_flight_number_and_bad_schedule(client, employee, auth_headers):
    client.post("/api/v1/employee/flights", json=_flight_body(), headers=auth_headers(employee))
    r = client.post("/api/v1/employee/flights", json=_flight_body(), headers=auth_headers(employee))
    assert r.status_code == 409

    body = _flight_body("MA902")
    body["arrivalTime"] = body["departureTime"]
    assert client.post("/api/v1/employee/flights", json=body, headers=auth_headers(employee)).status_code == 400


def test_update_flight_but_not_its_capacity(client, make_flight, employee, auth_headers):
    flight = make_flight()
    r = client.patch(f"/api/v1/employee/flights/{flight.id}", json={"gate": "C9", "status": "delayed"},
                     headers=auth_headers(employee))
    assert r.status_code == 200, r.text
    assert r.json()["gate"] == "C9"
    assert r.json()["status"] == "delayed"

    r = client.put(f"/api/v1/employee/flights/{flight.id}", json={"totalSeats": 10}, headers=auth_headers(employee))
    assert r.status_code == 400
    r = client.patch(f"/api/v1/employee/flights/{flight.id}", json={"status": "lost"}, headers=auth_headers(employee))
    assert r.status_code == 400


def test_delete_flight_blocked_while_tickets_exist(db, client, make_flight, customer, employee, auth_headers, passenger_data):
    from app.services.booking_service import create_booking

    empty = make_flight()
    r = client.delete(f"/api/v1/employee/flights/{empty.id}", headers=auth_headers(employee))
    assert r.status_code == 200
    assert client.get(f"/api/v1/flights/{empty.id}").status_code == 404

    sold = make_flight()
    create_booking(db, sold.id, customer, passenger_data, "12A", "card")
    r = client.delete(f"/api/v1/employee/flights/{sold.id}", headers=auth_headers(employee))
    assert r.status_code == 409
    assert r.json()["detail"]["code"] == "resource_in_use"


def test_passenger_crud_and_search(client, employee, customer, auth_headers):
    headers = auth_headers(employee)
    r = client.post("/api/v1/employee/passengers", json={
        "firstName": "Meena", "lastName": "Iyer", "email": "meena@example.com", "userId": customer.id,
    }, headers=headers)
    assert r.status_code == 200, r.text
    meena = r.json()
    assert meena["userId"] == customer.id
    client.post("/api/v1/employee/passengers", json={
        "firstName": "Karthik", "lastName": "Subramanian", "email": "karthik@example.com",
    }, headers=headers)

    found = client.get("/api/v1/employee/passengers", params={"search": "iye"}, headers=headers).json()
    assert [p["id"] for p in found] == [meena["id"]]
    assert len(client.get("/api/v1/employee/passengers", headers=headers).json()) == 2

    r = client.put(f"/api/v1/employee/passengers/{meena['id']}", json={"nationality": "Indian"}, headers=headers)
    assert r.json()["nationality"] == "Indian"
    r = client.put(f"/api/v1/employee/passengers/{meena['id']}", json={"firstName": "  "}, headers=headers)
    assert r.status_code == 400

    assert client.delete(f"/api/v1/employee/passengers/{meena['id']}", headers=headers).status_code == 200
    assert client.delete(f"/api/v1/employee/passengers/{meena['id']}", headers=headers).status_code == 404

    r = client.post("/api/v1/employee/passengers", json={
        "firstName": "X", "lastName": "Y", "email": "x@example.com", "userId": "missing",
    }, headers=headers)
    assert r.status_code == 400


def test_passenger_with_tickets_cannot_be_deleted(db, client, make_flight, customer, employee, auth_headers, passenger_data):
    from app.services.booking_service import create_booking

    result = create_booking(db, make_flight().id, customer, passenger_data, "12A", "card")
    r = client.delete(f"/api/v1/employee/passengers/{result.passenger.id}", headers=auth_headers(employee))
    assert r.status_code == 409


def test_employee_sees_every_ticket(client, make_flight, customer, other_customer, employee, auth_headers, db, passenger_data):
    from app.services.booking_service import create_booking

    flight = make_flight()
    create_booking(db, flight.id, customer, passenger_data, "12A", "card")
    create_booking(db, flight.id, other_customer, passenger_data, "12B", "card")
    tickets = client.get("/api/v1/employee/tickets", headers=auth_headers(employee)).json()
    assert sorted(t["seatNumber"] for t in tickets) == ["12A", "12B"]


def test_create_flight_rejects_oversized_price(client, employee, auth_headers):
    r = client.post("/api/v1/employee/flights", json=_flight_body(basePrice="1e30"), headers=auth_headers(employee))
    assert r.status_code == 400
    assert r.json()["detail"]["code"] == "validation_error"


def test_passenger_search_treats_wildcards_literally(client, employee, auth_headers):
    headers = auth_headers(employee)
    client.post("/api/v1/employee/passengers", json={
        "firstName": "Meena", "lastName": "Iyer", "email": "meena@example.com",
    }, headers=headers)
    assert client.get("/api/v1/employee/passengers", params={"search": "%"}, headers=headers).json() == []
    assert client.get("/api/v1/employee/passengers", params={"search": "m_ena"}, headers=headers).json() == []
