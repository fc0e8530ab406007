import pytest
from services.config_service import ConfigManager
from app import create_app
from test_helpers import make_location, make_report


@pytest.fixture(scope="session")
def config_manager():
    """Fixture for initializing ConfigManager."""
    return ConfigManager()


@pytest.fixture(scope="session")
def app_config(config_manager):
    """Fixture for application configuration."""
    return config_manager.config


@pytest.fixture
def app(app_config):
    """Flask app built the same way run.py builds it, with the Testing config."""
    app = create_app('Testing')
    app.config.update(app_config)
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def mock_locations():
    """Two ILL sites, one GA site; deliberately not in sheet order."""
    return [
        make_location(3, "Peachtree", "GA"),
        make_location(1, "Naperville", "ILL"),
        make_location(2, "Aurora", "ILL"),
    ]


@pytest.fixture
def mock_reports():
    """One week, all three locations reporting."""
    return [
        make_report(1, carCountMonFri="80", carCountSatSun="20", staffHoursMonFri="10", staffHoursSatSun="5",
                    retailCarCountMonFri="30", retailCarCountSatSun="10",
                    retailRevenueMonFri="600", retailRevenueSatSun="200",
                    totalRevenueMonFri="1600", totalRevenueSatSun="400",
                    totalClubPlansSold="4", totalClubPlanMembers="120"),
        make_report(2, carCountMonFri="30", carCountSatSun="20", staffHoursMonFri="6", staffHoursSatSun="4",
                    retailCarCountMonFri="10", retailCarCountSatSun="10",
                    retailRevenueMonFri="200", retailRevenueSatSun="200",
                    totalRevenueMonFri="700", totalRevenueSatSun="300",
                    totalClubPlansSold="2", totalClubPlanMembers="60"),
        make_report(3, carCountMonFri="20", carCountSatSun="10", staffHoursMonFri="4", staffHoursSatSun="2",
                    retailCarCountMonFri="10", retailCarCountSatSun="5",
                    retailRevenueMonFri="150", retailRevenueSatSun="75",
                    totalRevenueMonFri="400", totalRevenueSatSun="200",
                    totalClubPlansSold="3", totalClubPlanMembers="40"),
    ]
