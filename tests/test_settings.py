import pytest
import yaml

from fedboard.settings import (
    ChartRegistry,
    DashboardConfig,
    DockerRegistry,
    MenuConfig,
    get_config_key,
    get_dashboard_config,
    init_dashboard_config_from_mount_file,
    set_dashboard_config,
)


@pytest.fixture(autouse=True)
def _reset_config():
    set_dashboard_config(DashboardConfig())
    yield
    set_dashboard_config(DashboardConfig())


def _sample():
    password = "password"
    return DashboardConfig(
        docker_registries=[
            DockerRegistry(
                name="hub",
                url="https://registry.example.com",
                user="user",
                password=password,
                add_time=1700000000,
            )
        ],
        chart_registries=[ChartRegistry(name="charts", url="https://charts.example.com")],
        menu_configs=[
            MenuConfig(
                path="/overview",
                enable=True,
                sidebar_key="OVERVIEW",
                children=[MenuConfig(path="/overview/sub", enable=False, sidebar_key="SUB")],
            )
        ],
        path_prefix="/dashboard",
    )


def test_config_key_defaults_to_prod(monkeypatch):
    monkeypatch.delenv("ENV_NAME", raising=False)
    assert get_config_key() == "prod.yaml"


def test_config_key_uses_env_name(monkeypatch):
    monkeypatch.setenv("ENV_NAME", "staging")
    assert get_config_key() == "staging.yaml"


def test_yaml_round_trip():
    config = _sample()
    assert DashboardConfig.from_yaml(config.to_yaml()) == config


def test_dict_round_trip():
    config = _sample()
    assert DashboardConfig.from_dict(config.to_dict()) == config


def test_to_dict_uses_wire_names():
    data = _sample().to_dict()
    assert set(data) == {
        "docker_registries",
        "chart_registries",
        "menu_configs",
        "path_prefix",
    }
    assert data["docker_registries"][0]["add_time"] == 1700000000
    assert data["menu_configs"][0]["sidebar_key"] == "OVERVIEW"


def test_json_form_omits_empty_children_but_yaml_keeps_them():
    config = DashboardConfig(menu_configs=[MenuConfig(path="/a", enable=True)])
    assert "children" not in config.to_dict()["menu_configs"][0]
    loaded = yaml.safe_load(config.to_yaml())
    assert loaded["menu_configs"][0]["children"] == []


def test_missing_fields_take_defaults():
    config = DashboardConfig.from_dict({"path_prefix": "/x"})
    assert config == DashboardConfig(path_prefix="/x")


def test_empty_yaml_gives_default_config():
    assert DashboardConfig.from_yaml("") == DashboardConfig()


def test_wrong_field_type_is_rejected():
    with pytest.raises(ValueError):
        DashboardConfig.from_dict({"menu_configs": [{"enable": "maybe"}]})


def test_non_mapping_document_is_rejected():
    with pytest.raises(ValueError):
        DashboardConfig.from_yaml("- a\n- b\n")


def test_init_from_missing_file_raises(tmp_path):
    missing = tmp_path / "absent.yaml"
    with pytest.raises(FileNotFoundError, match="not exist"):
        init_dashboard_config_from_mount_file(missing)


def test_init_from_file_sets_current_config(tmp_path):
    config = _sample()
    path = tmp_path / "prod.yaml"
    path.write_text(config.to_yaml(), encoding="utf-8")
    returned = init_dashboard_config_from_mount_file(str(path))
    assert returned == config
    assert get_dashboard_config() == config


def test_init_from_invalid_yaml_keeps_previous_config(tmp_path):
    set_dashboard_config(_sample())
    path = tmp_path / "bad.yaml"
    path.write_text("docker_registries: [unclosed\n", encoding="utf-8")
    with pytest.raises(yaml.YAMLError):
        init_dashboard_config_from_mount_file(path)
    assert get_dashboard_config() == _sample()


def test_get_returns_a_copy():
    set_dashboard_config(_sample())
    copy = get_dashboard_config()
    copy.path_prefix = "/changed"
    copy.menu_configs.clear()
    assert get_dashboard_config() == _sample()