import pytest

from torchscene.model_manager import ModelManager


class FakeModel:
    def __init__(self, path):
        self.path = path
        self.renders = 0

    def render(self):
        self.renders += 1


@pytest.fixture
def loads():
    return []


@pytest.fixture
def manager(loads):
    def loader(path):
        loads.append(path)
        return FakeModel(path)

    return ModelManager(loader)


def test_load_model_caches(manager, loads):
    first = manager.load_model("a.gltf")
    second = manager.load_model("a.gltf")
    assert first is second
    assert loads == ["a.gltf"]
    assert first.path == "a.gltf"


def test_distinct_paths_load_separately(manager, loads):
    a = manager.load_model("a.gltf")
    b = manager.load_model("b.gltf")
    assert a is not b
    assert loads == ["a.gltf", "b.gltf"]
    assert len(manager) == 2


def test_get_model(manager):
    assert manager.get_model("missing.gltf") is None
    loaded = manager.load_model("x.gltf")
    assert manager.get_model("x.gltf") is loaded
    assert "x.gltf" in manager


def test_render_model(manager):
    model = manager.load_model("x.gltf")
    manager.render_model("x.gltf")
    manager.render_model("x.gltf")
    assert model.renders == 2


def test_render_missing_model_raises(manager):
    with pytest.raises(KeyError, match="Model not found"):
        manager.render_model("nope.gltf")