# ABOUTME: Tests for the import-woman HTTP endpoint
# ABOUTME: Drives the FastAPI app in-process through httpx.ASGITransport with a stub service

import httpx
import pytest

from women_galaxy.api.server import create_app
from women_galaxy.core.models import ImportOutcome, ImportRequest, ImportStatus
from women_galaxy.extraction.analysis import ExtractedProfile


class StubImportService:
    created_by = "web-import"

    def __init__(self, outcome: ImportOutcome):
        self.outcome = outcome
        self.requests: list[ImportRequest] = []

    async def import_one(self, request: ImportRequest) -> ImportOutcome:
        self.requests.append(request)
        return self.outcome.model_copy(update={"name": request.name})


def make_client(service) -> httpx.AsyncClient:
    app = create_app(service=service)
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver")


SUCCESS = ImportOutcome(
    name="Marie Curie",
    status=ImportStatus.SUCCESS,
    extracted=ExtractedProfile(
        intro="Marie Curie was a Polish physicist.",
        accomplishments="She won two Nobel Prizes.",
        birth_year=1867,
        birth_year_source="linked_data",
        nationality="polish",
        tags=["physicist", "polish", "nobel"],
    ),
    image_url="https://cdn.example.org/women/1_marie_curie.webp",
    profile_id="7f3a9c1e-0000-4000-8000-000000000001",
)


class TestImportWoman:
    @pytest.mark.asyncio
    async def test_success_returns_profile(self):
        service = StubImportService(SUCCESS)

        async with make_client(service) as client:
            response = await client.post("/api/import-woman", json={"name": " Marie Curie ", "wikiTitle": "Marie_Curie"})

        assert response.status_code == 200
        profile = response.json()["profile"]
        assert profile["id"] == SUCCESS.profile_id
        assert profile["name"] == "Marie Curie"
        assert profile["birth_year"] == 1867
        assert profile["tags"] == ["physicist", "polish", "nobel"]
        assert profile["image_url"] == SUCCESS.image_url
        assert profile["created_by"] == "web-import"

        assert service.requests[0].name == "Marie Curie"
        assert service.requests[0].effective_title == "Marie_Curie"

    @pytest.mark.asyncio
    async def test_title_defaults_to_name(self):
        service = StubImportService(SUCCESS)

        async with make_client(service) as client:
            await client.post("/api/import-woman", json={"name": "Ada Lovelace"})

        assert service.requests[0].effective_title == "Ada_Lovelace"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{}, {"name": ""}, {"name": "   "}, {"wikiTitle": "Marie_Curie"}])
    async def test_name_is_required(self, body):
        service = StubImportService(SUCCESS)

        async with make_client(service) as client:
            response = await client.post("/api/import-woman", json=body)

        assert response.status_code == 400
        assert response.json() == {"detail": "Name is required"}
        assert service.requests == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "post_kwargs",
        [
            {},
            {"content": "not json", "headers": {"content-type": "application/json"}},
            {"json": [1, 2]},
            {"json": "Marie Curie"},
            {"json": {"name": 123}},
            {"json": {"name": ["Marie Curie"]}},
        ],
    )
    async def test_unparseable_body_is_a_missing_name(self, post_kwargs):
        service = StubImportService(SUCCESS)

        async with make_client(service) as client:
            response = await client.post("/api/import-woman", **post_kwargs)

        assert response.status_code == 400
        assert response.json() == {"detail": "Name is required"}
        assert service.requests == []

    @pytest.mark.asyncio
    async def test_not_found(self):
        outcome = ImportOutcome(
            name="Nobody",
            status=ImportStatus.FAILED,
            reason='No Wikipedia page found for "Nobody". Try "Nobody:Exact_Wikipedia_Title"',
            failure_kind="not_found",
        )

        async with make_client(StubImportService(outcome)) as client:
            response = await client.post("/api/import-woman", json={"name": "Nobody"})

        assert response.status_code == 404
        assert response.json()["detail"].startswith('No Wikipedia page found for "Nobody"')

    @pytest.mark.asyncio
    async def test_duplicate(self):
        outcome = ImportOutcome(name="Marie Curie", status=ImportStatus.SKIPPED, reason='"Marie Curie" already exists')

        async with make_client(StubImportService(outcome)) as client:
            response = await client.post("/api/import-woman", json={"name": "Marie Curie"})

        assert response.status_code == 409
        assert response.json() == {"detail": '"Marie Curie" already exists in the database'}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kind", ["upstream", "store", "unexpected"])
    async def test_other_failures_are_server_errors(self, kind):
        outcome = ImportOutcome(name="Marie Curie", status=ImportStatus.FAILED, reason="Wikipedia API error", failure_kind=kind)

        async with make_client(StubImportService(outcome)) as client:
            response = await client.post("/api/import-woman", json={"name": "Marie Curie"})

        assert response.status_code == 500
        assert response.json() == {"detail": "Wikipedia API error"}


@pytest.mark.asyncio
async def test_health_check():
    async with make_client(StubImportService(SUCCESS)) as client:
        response = await client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
