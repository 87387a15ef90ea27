from jobtrack.config import settings
from jobtrack.core import scheduler as scheduler_module
from jobtrack.core.startup_checks import check_environment, check_storage


async def test_health_endpoints(client):
    health = (await client.get("/health")).json()
    assert health["status"] == "healthy"

    api_health = (await client.get("/api/health")).json()
    assert api_health["status"] == "OK"
    assert "timestamp" in api_health

    root = (await client.get("/")).json()
    assert root["status"] == "operational"


def test_setup_jobs_registers_notification_dispatch(monkeypatch):
    monkeypatch.setattr(settings, "PERFORMANCE_ROLLUP_ENABLED", True)
    try:
        scheduler_module.setup_jobs()
        job_ids = {job.id for job in scheduler_module.scheduler.get_jobs()}
    finally:
        scheduler_module.scheduler.remove_all_jobs()

    assert job_ids == {"dispatch_notifications", "caller_performance_rollup"}


def test_storage_check_creates_resume_dir(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path / "uploads"))

    assert check_storage() is True
    assert (tmp_path / "uploads" / settings.RESUME_SUBDIR).is_dir()


def test_default_secret_fails_only_in_production(monkeypatch):
    monkeypatch.setattr(settings, "SECRET_KEY", "change-this-secret-key-in-production")

    monkeypatch.setattr(settings, "ENVIRONMENT", "development")
    assert check_environment() is True

    monkeypatch.setattr(settings, "ENVIRONMENT", "production")
    assert check_environment() is False
