from ecologika.services.i18n import TRANSLATIONS, Translator, resolve_language


def test_unknown_language_falls_back_to_portuguese():
    assert resolve_language("fr") == "pt"
    assert resolve_language(None) == "pt"
    assert resolve_language("en") == "en"


def test_lookup_and_missing_key():
    assert Translator("en").t("nav.products") == "Products"
    assert Translator("pt").t("nav.products") == "Produtos"
    assert Translator("en").t("does.not.exist") == "does.not.exist"


def test_parameters_are_formatted():
    assert Translator("en").t("images.limit", max=5) == "You can add at most 5 images."


def test_both_tables_have_the_same_keys():
    assert set(TRANSLATIONS["pt"]) == set(TRANSLATIONS["en"])


async def test_language_cookie_round_trip(client):
    response = await client.put("/api/i18n/language", json={"language": "en"})
    assert response.status_code == 200
    assert response.json()["language"] == "en"
    assert response.cookies.get("ecologika_language") == "en"

    response = await client.get("/api/i18n", headers={"Cookie": "ecologika_language=en"})
    assert response.json()["translations"]["nav.home"] == "Home"


async def test_unrecognized_language_is_persisted_as_default(client):
    response = await client.put("/api/i18n/language", json={"language": "de"})
    assert response.json()["language"] == "pt"
    assert response.cookies.get("ecologika_language") == "pt"
