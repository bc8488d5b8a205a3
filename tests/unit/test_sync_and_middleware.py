# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import threading

import httpx

from isbot import BotFilterMiddleware, Bots, SynchronizedBots, get_user_agent

BROWSER_UA = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/96.0.4664.110 Safari/537.36"
)
BOT_UA = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 9_1 like Mac OS X) AppleWebKit/601.1.46 (KHTML, like Gecko) Version/9.0 "
    "Mobile/13B143 Safari/601.1 (compatible; AdsBot-Google-Mobile; +http://www.google.com/mobile/adsbot.html)"
)
LIGHTHOUSE_UA = (
    "Mozilla/5.0 (Linux; Android 7.0; Moto G (4)) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/84.0.4143.7 Mobile Safari/537.36 Chrome-Lighthouse"
)


def _app(environ, start_response):
    start_response("200 OK", [("Content-Type", "text/plain")])
    return [f"Home {environ.get('PATH_INFO', '/')}".encode()]


def _call(app, user_agent=None, path="/"):
    environ = {"REQUEST_METHOD": "GET", "PATH_INFO": path}
    if user_agent is not None:
        environ["HTTP_USER_AGENT"] = user_agent
    captured = {}

    def start_response(status, headers):
        captured["status"] = status
        captured["headers"] = dict(headers)

    body = b"".join(app(environ, start_response))
    return captured["status"], captured["headers"], body


def test_synchronized_bots_delegates_queries_and_mutations():
    bots = SynchronizedBots(Bots("googlebot"))
    assert bots.is_bot("Googlebot/2.1")
    assert not bots.is_bot("Special/1.0")

    bots.append(["^Special/"])
    assert bots.is_bot("Special/1.0")
    assert bots.patterns == frozenset({"googlebot", "^special/"})
    assert len(bots) == 2

    bots.remove("GoogleBot")
    assert not bots.is_bot("Googlebot/2.1")
    assert "Bots(patterns=1)" in repr(bots)


def test_synchronized_bots_defaults_to_bundled_list():
    assert SynchronizedBots().is_bot("Googlebot-Image/1.0")


def test_synchronized_bots_concurrent_mutation():
    bots = SynchronizedBots(Bots(""))
    names = [f"agent{i}x" for i in range(40)]
    seen = []

    def worker(name):
        bots.append([name])
        seen.append((name, bots.is_bot(f"Mozilla/5.0 {name}")))

    threads = [threading.Thread(target=worker, args=(name,)) for name in names]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(seen) == sorted((name, True) for name in names)
    assert bots.patterns == frozenset(names)
    assert all(bots.is_bot(name) for name in names)


def test_get_user_agent_from_environ_and_headers():
    assert get_user_agent({"HTTP_USER_AGENT": " Googlebot "}) == "Googlebot"
    assert get_user_agent({"User-Agent": "curl/8.0"}) == "curl/8.0"
    assert get_user_agent({"USER-AGENT": "wget"}) == "wget"
    assert get_user_agent(httpx.Headers({"user-agent": "httpx"})) == "httpx"
    assert get_user_agent({"user-agent": b"bytes/1.0"}) == "bytes/1.0"
    assert get_user_agent({"HTTP_USER_AGENT": "   "}) is None
    assert get_user_agent({"Accept": "*/*"}) is None
    assert get_user_agent({}) is None
    assert get_user_agent(None) is None


def test_middleware_rejects_bots():
    app = BotFilterMiddleware(_app, Bots.default())

    status, headers, body = _call(app, BOT_UA)

    assert status == "403 Forbidden"
    assert body == b"Bots not allowed"
    assert headers["Content-Length"] == str(len(body))


def test_middleware_passes_browsers_and_missing_user_agent():
    app = BotFilterMiddleware(_app, Bots.default())

    assert _call(app, BROWSER_UA, path="/login") == ("200 OK", {"Content-Type": "text/plain"}, b"Home /login")
    assert _call(app)[0] == "200 OK"


def test_middleware_can_reject_missing_user_agent():
    app = BotFilterMiddleware(_app, Bots(""), allow_missing_user_agent=False, status="401 Unauthorized", body=b"no")

    status, _, body = _call(app)

    assert status == "401 Unauthorized"
    assert body == b"no"
    assert _call(app, BROWSER_UA)[0] == "200 OK"


def test_middleware_respects_runtime_removal():
    bots = SynchronizedBots(Bots.default())
    app = BotFilterMiddleware(_app, bots)
    assert _call(app, LIGHTHOUSE_UA)[0] == "403 Forbidden"

    bots.remove(["Chrome-Lighthouse"])

    assert _call(app, LIGHTHOUSE_UA)[0] == "200 OK"
    assert _call(app, BOT_UA)[0] == "403 Forbidden"
