import asyncio
import json

from aiohttp.test_utils import TestClient, TestServer

from modules.common.runtime import create_app
from shared.config import Settings

PING = b'{"type":1}'


def _settings(public_key_hex: str) -> Settings:
    return Settings(
        env_name="test",
        discord_public_key=public_key_hex,
        website_data_spreadsheet_id="test-sheet",
    )


async def _post(app, body: bytes, headers: dict[str, str]):
    async with TestServer(app) as server:
        async with TestClient(server) as client:
            resp = await client.post("/interactions", data=body, headers=headers)
            return resp.status, await resp.text(), resp.headers.get("X-Trace-Id")


def test_ping_with_valid_signature_pongs(public_key_hex, sign, fake_redis, fake_source, fake_discord):
    async def runner() -> None:
        app = await create_app(
            _settings(public_key_hex), store=fake_redis, source=fake_source, discord_client=fake_discord
        )
        status, text, trace = await _post(app, PING, sign(PING))

        assert status == 200
        assert json.loads(text) == {"type": 1}
        assert trace
        assert fake_source.calls == []

    asyncio.run(runner())


def test_bad_signature_is_unauthorized(public_key_hex, fake_redis, fake_source, fake_discord):
    async def runner() -> None:
        app = await create_app(
            _settings(public_key_hex), store=fake_redis, source=fake_source, discord_client=fake_discord
        )
        headers = {"X-Signature-Ed25519": "acbd", "X-Signature-Timestamp": "1234"}
        status, text, _ = await _post(app, PING, headers)

        assert status == 401
        assert text == "authorization failed"

    asyncio.run(runner())


def test_missing_headers_are_bad_requests(public_key_hex, fake_redis, fake_source, fake_discord):
    async def runner() -> None:
        app = await create_app(
            _settings(public_key_hex), store=fake_redis, source=fake_source, discord_client=fake_discord
        )
        async with TestServer(app) as server:
            async with TestClient(server) as client:
                resp = await client.post("/interactions", data=PING)
                assert resp.status == 400
                assert await resp.text() == "invalid signature"

                resp = await client.post(
                    "/interactions", data=PING, headers={"X-Signature-Ed25519": "acbd"}
                )
                assert resp.status == 400
                assert await resp.text() == "invalid signature timestamp"

    asyncio.run(runner())


def test_missing_public_key_is_server_error(public_key_hex, sign, fake_redis, fake_source, fake_discord):
    async def runner() -> None:
        app = await create_app(
            _settings(""), store=fake_redis, source=fake_source, discord_client=fake_discord
        )
        status, _, _ = await _post(app, PING, sign(PING))

        assert status == 500

    asyncio.run(runner())


def test_signed_garbage_body_is_bad_request(public_key_hex, sign, fake_redis, fake_source, fake_discord):
    async def runner() -> None:
        app = await create_app(
            _settings(public_key_hex), store=fake_redis, source=fake_source, discord_client=fake_discord
        )
        body = b"{not json"
        status, text, _ = await _post(app, body, sign(body))

        assert status == 400
        assert text.startswith("invalid request body: ")

    asyncio.run(runner())


def test_string_type_code_is_bad_request(public_key_hex, sign, fake_redis, fake_source, fake_discord):
    async def runner() -> None:
        app = await create_app(
            _settings(public_key_hex), store=fake_redis, source=fake_source, discord_client=fake_discord
        )
        body = b'{"type":"1"}'
        status, text, _ = await _post(app, body, sign(body))

        assert status == 400
        assert text.startswith("invalid request body: ")

    asyncio.run(runner())


def test_unsupported_type_is_bad_request(public_key_hex, sign, fake_redis, fake_source, fake_discord):
    async def runner() -> None:
        app = await create_app(
            _settings(public_key_hex), store=fake_redis, source=fake_source, discord_client=fake_discord
        )
        body = b'{"type":3}'
        status, text, _ = await _post(app, body, sign(body))

        assert status == 400
        assert text == "unsupported interaction type"

    asyncio.run(runner())


def test_signed_parts_command_end_to_end(public_key_hex, sign, fake_redis, fake_source, fake_discord):
    async def runner() -> None:
        app = await create_app(
            _settings(public_key_hex), store=fake_redis, source=fake_source, discord_client=fake_discord
        )
        body = json.dumps(
            {
                "type": 2,
                "data": {"name": "parts", "options": [{"name": "project", "type": 3, "value": "10-hildas-healing"}]},
            }
        ).encode("utf-8")
        status, text, _ = await _post(app, body, sign(body))

        assert status == 200
        assert json.loads(text) == {
            "type": 4,
            "data": {"content": "[Parts for Hilda's Healing](https://vvgo.org/parts?project=10-hildas-healing)"},
        }
        assert fake_source.calls == [("test-sheet", "Projects")]

    asyncio.run(runner())
