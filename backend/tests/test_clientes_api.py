"""
Clientes API — HTTP Integration Tests
=======================================

What:  End-to-end tests through the FastAPI app with a per-test SQLite database.
How:   HTTPX AsyncClient over ASGITransport (no server). The app's
       get_db_session dependency is overridden in conftest.test_client.

What we test:
    ✅ Status codes and JSON shapes of every endpoint
    ✅ Error bodies: {message, errors} for 400, {message} for 404
    ✅ Update checks the payload before the id
    ✅ Pagination defaults and ordering
    ✅ Photo upload, replacement and removal on delete
    ✅ Request ID header and CORS preflight
"""

from unittest.mock import patch

import pytest

from app.exceptions import MSG_BAD_REQUEST, MSG_NOT_FOUND, MSG_UPLOAD_FAILED, MSG_UPLOAD_OK

BASE = "/api/clientes"


async def _create(client, **fields) -> None:
    payload = {
        "nombre": "Juan",
        "apellido": "Pérez",
        "email": "juan.perez@gmail.com",
        "createdAt": "2021-01-22",
    }
    payload.update(fields)
    response = await client.post(BASE, json=payload)
    assert response.status_code == 201


class TestCreateAndGet:

    @pytest.mark.asyncio
    async def test_create_returns_201_without_body(self, test_client, sample_payload):
        response = await test_client.post(BASE, json=sample_payload)
        assert response.status_code == 201
        assert response.content == b""

    @pytest.mark.asyncio
    async def test_get_after_create(self, test_client, sample_payload):
        await test_client.post(BASE, json=sample_payload)

        response = await test_client.get(f"{BASE}/1")

        assert response.status_code == 200
        assert response.json() == {
            "id": 1,
            "nombre": "Juan",
            "apellido": "Pérez",
            "email": "juan.perez@gmail.com",
            "createdAt": "2021-01-22",
            "imagen": None,
        }

    @pytest.mark.asyncio
    async def test_create_missing_email(self, test_client, sample_payload):
        del sample_payload["email"]

        response = await test_client.post(BASE, json=sample_payload)

        assert response.status_code == 400
        assert response.json() == {
            "errors": ["El campo [EMAIL] no puede estar vacío"],
            "message": MSG_BAD_REQUEST,
        }

    @pytest.mark.asyncio
    async def test_create_reports_every_invalid_field(self, test_client):
        response = await test_client.post(BASE, json={"nombre": "Al", "email": "nope"})

        assert response.status_code == 400
        errors = response.json()["errors"]
        assert [e.split("]")[0] for e in errors] == [
            "El campo [NOMBRE",
            "El campo [APELLIDO",
            "El campo [EMAIL",
            "El campo [CREATEDAT",
        ]

    @pytest.mark.asyncio
    async def test_duplicate_email_is_server_error(self, test_client, sample_payload):
        await test_client.post(BASE, json=sample_payload)

        response = await test_client.post(BASE, json=sample_payload)

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "Se produjo un error al insertar en la base de datos."
        assert body["error"].startswith("IntegrityError: ")

    @pytest.mark.asyncio
    async def test_get_unknown(self, test_client):
        response = await test_client.get(f"{BASE}/42")
        assert response.status_code == 404
        assert response.json() == {"message": MSG_NOT_FOUND}

    @pytest.mark.asyncio
    async def test_non_numeric_id(self, test_client):
        response = await test_client.get(f"{BASE}/abc")
        assert response.status_code == 400
        assert response.json() == {
            "errors": ["El campo [ID] debe ser un número entero"],
            "message": MSG_BAD_REQUEST,
        }

    @pytest.mark.asyncio
    async def test_non_object_body(self, test_client):
        response = await test_client.post(BASE, json=["Juan"])
        assert response.status_code == 400
        assert response.json()["errors"][0].endswith("debe ser un objeto JSON")


class TestListing:

    @pytest.mark.asyncio
    async def test_list_all(self, test_client):
        await _create(test_client, email="a@gmail.com")
        await _create(test_client, email="b@gmail.com")

        response = await test_client.get(BASE)

        assert response.status_code == 200
        assert [c["email"] for c in response.json()] == ["a@gmail.com", "b@gmail.com"]
        assert "createdAt" in response.json()[0]

    @pytest.mark.asyncio
    async def test_list_all_empty(self, test_client):
        response = await test_client.get(BASE)
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_paginated_defaults(self, test_client):
        for i in range(7):
            await _create(test_client, email=f"user{i}@gmail.com")

        response = await test_client.get(f"{BASE}/paginated")

        assert response.status_code == 200
        body = response.json()
        assert [c["id"] for c in body["content"]] == [7, 6, 5, 4, 3]
        assert body["number"] == 0
        assert body["size"] == 5
        assert body["totalElements"] == 7
        assert body["totalPages"] == 2
        assert body["numberOfElements"] == 5
        assert body["first"] is True
        assert body["last"] is False
        assert body["empty"] is False
        assert body["sort"] == {"field": "id", "direction": "desc"}

    @pytest.mark.asyncio
    async def test_paginated_ascending_by_name(self, test_client):
        for i, nombre in enumerate(["Carla", "Andrés", "Beatriz"]):
            await _create(test_client, nombre=nombre, email=f"user{i}@gmail.com")

        response = await test_client.get(
            f"{BASE}/paginated", params={"page": 0, "limit": 2, "sort": "nombre", "order": "asc"}
        )

        body = response.json()
        assert [c["nombre"] for c in body["content"]] == ["Andrés", "Beatriz"]
        assert body["totalPages"] == 2

    @pytest.mark.asyncio
    async def test_paginated_uppercase_asc_is_descending(self, test_client):
        for i in range(3):
            await _create(test_client, email=f"user{i}@gmail.com")

        response = await test_client.get(f"{BASE}/paginated", params={"order": "ASC"})
        assert [c["id"] for c in response.json()["content"]] == [3, 2, 1]

    @pytest.mark.asyncio
    async def test_paginated_unknown_sort_field(self, test_client):
        response = await test_client.get(f"{BASE}/paginated", params={"sort": "password"})
        assert response.status_code == 400
        assert response.json()["errors"][0].startswith("El campo [SORT]")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "params, error",
        [
            ({"page": -1}, "El campo [PAGE] debe ser mayor o igual que 0"),
            ({"limit": 0}, "El campo [LIMIT] debe ser mayor o igual que 1"),
            ({"page": "x"}, "El campo [PAGE] debe ser un número entero"),
            ({"page": "10000000000000000000"}, "El campo [PAGE] debe ser menor o igual que 2147483647"),
            ({"limit": "10000000000000000000"}, "El campo [LIMIT] debe ser menor o igual que 2147483647"),
        ],
    )
    async def test_paginated_bad_query(self, test_client, params, error):
        response = await test_client.get(f"{BASE}/paginated", params=params)
        assert response.status_code == 400
        assert response.json() == {"errors": [error], "message": MSG_BAD_REQUEST}

    @pytest.mark.asyncio
    async def test_paginated_largest_page(self, test_client):
        await _create(test_client)
        response = await test_client.get(
            f"{BASE}/paginated", params={"page": 2_147_483_647, "limit": 2_147_483_647}
        )
        assert response.status_code == 200
        assert response.json()["content"] == []


class TestUpdate:

    @pytest.mark.asyncio
    async def test_update_existing(self, test_client, sample_payload):
        await test_client.post(BASE, json=sample_payload)
        sample_payload.update(nombre="María", email="maria@gmail.com")

        response = await test_client.put(f"{BASE}/1", json=sample_payload)

        assert response.status_code == 201
        fetched = (await test_client.get(f"{BASE}/1")).json()
        assert fetched["nombre"] == "María"
        assert fetched["email"] == "maria@gmail.com"

    @pytest.mark.asyncio
    async def test_invalid_payload_for_unknown_id_is_400(self, test_client, sample_payload):
        del sample_payload["email"]
        response = await test_client.put(f"{BASE}/999", json=sample_payload)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_valid_payload_for_unknown_id_is_404(self, test_client, sample_payload):
        response = await test_client.put(f"{BASE}/999", json=sample_payload)
        assert response.status_code == 404
        assert response.json() == {"message": MSG_NOT_FOUND}


class TestUploadAndDelete:

    @pytest.mark.asyncio
    async def test_upload_sets_photo(self, test_client, sample_payload, upload_dir, sample_image_bytes):
        await test_client.post(BASE, json=sample_payload)

        response = await test_client.post(
            f"{BASE}/upload",
            files={"image": ("mi foto.jpg", sample_image_bytes, "image/jpeg")},
            data={"id": "1"},
        )

        assert response.status_code == 201
        assert response.json() == {"message": MSG_UPLOAD_OK}
        imagen = (await test_client.get(f"{BASE}/1")).json()["imagen"]
        assert imagen.endswith("_mifoto.jpg")
        assert (upload_dir / imagen).read_bytes() == sample_image_bytes

    @pytest.mark.asyncio
    async def test_upload_replaces_previous_photo(
        self, test_client, sample_payload, upload_dir, sample_image_bytes
    ):
        await test_client.post(BASE, json=sample_payload)
        files = {"image": ("foto.jpg", sample_image_bytes, "image/jpeg")}

        await test_client.post(f"{BASE}/upload", files=files, data={"id": "1"})
        first = (await test_client.get(f"{BASE}/1")).json()["imagen"]
        await test_client.post(f"{BASE}/upload", files=files, data={"id": "1"})
        second = (await test_client.get(f"{BASE}/1")).json()["imagen"]

        assert first != second
        assert not (upload_dir / first).exists()
        assert [p.name for p in upload_dir.iterdir()] == [second]

    @pytest.mark.asyncio
    async def test_empty_upload_is_noop(self, test_client, sample_payload, upload_dir):
        await test_client.post(BASE, json=sample_payload)

        response = await test_client.post(
            f"{BASE}/upload",
            files={"image": ("vacia.jpg", b"", "image/jpeg")},
            data={"id": "1"},
        )

        assert response.status_code == 201
        assert response.json() == {}
        assert (await test_client.get(f"{BASE}/1")).json()["imagen"] is None
        assert list(upload_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_upload_unknown_client(self, test_client, upload_dir, sample_image_bytes):
        response = await test_client.post(
            f"{BASE}/upload",
            files={"image": ("foto.jpg", sample_image_bytes, "image/jpeg")},
            data={"id": "7"},
        )
        assert response.status_code == 404
        assert list(upload_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_upload_without_id(self, test_client, sample_image_bytes):
        response = await test_client.post(
            f"{BASE}/upload",
            files={"image": ("foto.jpg", sample_image_bytes, "image/jpeg")},
        )
        assert response.status_code == 400
        assert response.json()["errors"] == ["El campo [ID] no puede estar vacío"]

    @pytest.mark.asyncio
    async def test_upload_write_failure(self, test_client, sample_payload, sample_image_bytes):
        await test_client.post(BASE, json=sample_payload)

        with patch("app.services.file_service.aiofiles.open", side_effect=PermissionError("denied")):
            response = await test_client.post(
                f"{BASE}/upload",
                files={"image": ("foto.jpg", sample_image_bytes, "image/jpeg")},
                data={"id": "1"},
            )

        assert response.status_code == 500
        assert response.json() == {"message": MSG_UPLOAD_FAILED, "error": "PermissionError: denied"}
        assert (await test_client.get(f"{BASE}/1")).json()["imagen"] is None

    @pytest.mark.asyncio
    async def test_delete_removes_record_and_photo(
        self, test_client, sample_payload, upload_dir, sample_image_bytes
    ):
        await test_client.post(BASE, json=sample_payload)
        await test_client.post(
            f"{BASE}/upload",
            files={"image": ("foto.jpg", sample_image_bytes, "image/jpeg")},
            data={"id": "1"},
        )
        assert len(list(upload_dir.iterdir())) == 1

        response = await test_client.delete(f"{BASE}/1")

        assert response.status_code == 204
        assert list(upload_dir.iterdir()) == []
        assert (await test_client.get(f"{BASE}/1")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_unknown(self, test_client):
        response = await test_client.delete(f"{BASE}/5")
        assert response.status_code == 404
        assert response.json() == {"message": MSG_NOT_FOUND}


class TestCrossCutting:

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get(BASE)
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_request_id_propagated(self, test_client):
        response = await test_client.get(BASE, headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("origin", ["http://localhost:4200", "http://localhost:8080"])
    async def test_cors_preflight_allowed(self, test_client, origin):
        response = await test_client.options(
            BASE,
            headers={"Origin": origin, "Access-Control-Request-Method": "POST"},
        )
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == origin

    @pytest.mark.asyncio
    async def test_cors_preflight_rejected(self, test_client):
        response = await test_client.options(
            BASE,
            headers={"Origin": "http://evil.example", "Access-Control-Request-Method": "POST"},
        )
        assert response.status_code == 400
        assert "access-control-allow-origin" not in response.headers

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["uploads"] == "writable"
