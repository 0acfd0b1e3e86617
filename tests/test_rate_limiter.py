from barbershop import config, rate_limiter


def test_check_rate_limit_denies_after_limit():
    results = [rate_limiter.check_rate_limit("test:1.2.3.4", limit=3, window_seconds=60) for _ in range(4)]

    assert [allowed for allowed, _, _ in results] == [True, True, True, False]
    assert results[-1][1] == 3
    assert 0 < results[-1][2] <= 60


def test_keys_are_counted_separately():
    for _ in range(2):
        rate_limiter.check_rate_limit("test:a", limit=2, window_seconds=60)

    allowed, count, _ = rate_limiter.check_rate_limit("test:b", limit=2, window_seconds=60)
    assert allowed is True
    assert count == 1


def test_redis_client_is_none_without_url(monkeypatch):
    monkeypatch.setattr(config, "REDIS_URL", None)
    monkeypatch.setattr(rate_limiter, "redis_client", None)

    assert rate_limiter.get_redis_client() is None


def test_forgot_password_is_rate_limited(client, monkeypatch):
    monkeypatch.setattr(config, "RATE_LIMIT_ENABLED", True)
    monkeypatch.setattr(config, "REDIS_URL", None)
    monkeypatch.setattr(rate_limiter, "redis_client", None)

    statuses = [
        client.post("/esqueci-senha", json={"email": "nobody@example.com"}).status_code for _ in range(6)
    ]

    assert statuses[:5] == [400] * 5
    assert statuses[5] == 429
    response = client.post("/esqueci-senha", json={"email": "nobody@example.com"})
    assert response.json() == {"error": "Muitas tentativas. Tente novamente mais tarde."}
    assert int(response.headers["Retry-After"]) > 0
