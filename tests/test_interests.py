import pytest

from ecologika.models.interest import Interest
from ecologika.services.interests import categorize_interests, validate_nif_cnpj


@pytest.mark.parametrize("value", ["12.345.678/0001-90", "123456789"])
def test_valid_nif_cnpj(value):
    assert validate_nif_cnpj(value)


@pytest.mark.parametrize("value", ["12345678", "12.345.678/0001-9", "abc", "1234567890"])
def test_invalid_nif_cnpj(value):
    assert not validate_nif_cnpj(value)


def test_categorize_interests():
    groups = categorize_interests([Interest(key="metal"), Interest(key="renewable-energy"), Interest(key="unknown")])
    assert [o.label for o in groups.residuos] == ["Metal"]
    assert [o.label for o in groups.projetos_certificados] == ["Energia Renovável"]
    assert groups.projetos_apoiados == groups.projetos_certificados


async def test_interest_endpoints(client, db):
    await db.interesse.insert_many([Interest(key="plastic").model_dump(), Interest(key="waste-and-biomass").model_dump()])

    grouped = (await client.get("/api/interests")).json()
    assert [o["key"] for o in grouped["residuos"]] == ["plastic"]
    assert [o["label"] for o in grouped["projetos_apoiados"]] == ["Resíduos e Biomassa"]

    everything = (await client.get("/api/interests/all")).json()
    assert [i["key"] for i in everything] == ["plastic", "waste-and-biomass"]


async def test_registration_rejects_malformed_nif(client):
    response = await client.post("/api/auth/register", json={
        "email": "a@example.com",
        "confirm_email": "a@example.com",
        "password": "segura123",
        "confirm_password": "segura123",
        "first_name": "A",
        "last_name": "B",
        "nif_cnpj": "12-34",
        "accept_terms": True,
    })
    assert response.status_code == 400
    assert response.json()["detail"] == "NIF/CNPJ inválido."
