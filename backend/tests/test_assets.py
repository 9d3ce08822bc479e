import io

from pokedex.core.assets import AssetStore


def test_stage_bind_discard(tmp_path):
    store = AssetStore(tmp_path, "http://example.test/")

    upload = store.stage(io.BytesIO(b"img"), "pika.JPG")
    assert upload.path.parent == store.directory
    assert upload.path.name.startswith("temp_")
    assert upload.path.suffix == ".JPG"

    url = store.bind(upload, 25)
    assert url == "http://example.test/assets/pokemons/25.JPG"
    assert not upload.path.exists()
    assert (store.directory / "25.JPG").read_bytes() == b"img"

    # повторный discard после bind ничего не ломает
    store.discard(upload)


def test_bind_overwrites_existing(tmp_path):
    store = AssetStore(tmp_path, "http://example.test")
    store.bind(store.stage(io.BytesIO(b"old"), "a.png"), 1)
    store.bind(store.stage(io.BytesIO(b"new"), "b.png"), 1)
    assert (store.directory / "1.png").read_bytes() == b"new"


def test_stage_without_extension(tmp_path):
    store = AssetStore(tmp_path, "http://example.test")
    url = store.bind(store.stage(io.BytesIO(b"x"), "blob"), 3)
    assert url.endswith("/assets/pokemons/3")


def test_local_filename(tmp_path):
    store = AssetStore(tmp_path, "http://example.test")
    assert store.local_filename("http://example.test/assets/pokemons/4.png") == "4.png"
    # хост не важен: база могла переехать
    assert store.local_filename("http://old-host:3000/assets/pokemons/4.png") == "4.png"
    assert store.local_filename(store.placeholder_url) is None
    assert store.local_filename("https://cdn.example/pikachu.png") is None
    assert store.local_filename("http://x/assets/pokemons/../secret") is None
    assert store.local_filename(None) is None


def test_remove(tmp_path):
    store = AssetStore(tmp_path, "http://example.test")
    store.ensure()
    (store.directory / "9.png").write_bytes(b"x")

    assert store.remove("http://example.test/assets/pokemons/9.png") is True
    assert not (store.directory / "9.png").exists()
    # второй раз файла уже нет
    assert store.remove("http://example.test/assets/pokemons/9.png") is False


def test_remove_when_file_vanishes_before_unlink(tmp_path, monkeypatch):
    store = AssetStore(tmp_path, "http://example.test")
    store.ensure()
    (store.directory / "9.png").write_bytes(b"x")

    def vanished(self, missing_ok=False):
        # кто-то другой успел удалить файл
        raise FileNotFoundError(str(self))

    monkeypatch.setattr("pathlib.Path.unlink", vanished)

    assert store.remove("http://example.test/assets/pokemons/9.png") is False
