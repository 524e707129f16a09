from pathlib import Path

from customsource.utils.files import get_project_root, init_customsource, is_initialized


def test_get_project_root(monkeypatch, tmp_path):
    project_root = tmp_path / 'project'
    project_root.mkdir()
    (project_root / 'pyproject.toml').touch()

    sub_dir = project_root / 'src' / 'deep' / 'dir'
    sub_dir.mkdir(parents=True)

    monkeypatch.setattr(Path, 'cwd', lambda: sub_dir)

    root = get_project_root()
    assert root == project_root


def test_get_project_root_default(monkeypatch, tmp_path):
    # No marker anywhere: fall back to the current directory
    monkeypatch.setattr(Path, 'cwd', lambda: tmp_path)

    assert get_project_root() == tmp_path


def test_init_customsource(mocker, tmp_path):
    project_root = tmp_path / 'project'
    project_root.mkdir()
    mocker.patch('customsource.utils.files.get_project_root', return_value=project_root)

    assert not is_initialized()

    storage_path = init_customsource()

    assert is_initialized()
    assert storage_path == project_root / '.customsource' / 'sources'
    assert storage_path.is_dir()
    assert (project_root / '.customsource' / 'logs').is_dir()
    assert (project_root / '.customsource' / '.gitignore').read_text() == '# Automatically created by customsource\n*\n'


def test_init_customsource_custom_name(mocker, tmp_path):
    mocker.patch('customsource.utils.files.get_project_root', return_value=tmp_path)

    storage_path = init_customsource('custom_storage')

    assert storage_path == tmp_path / '.customsource' / 'custom_storage'
    assert storage_path.is_dir()


def test_init_keeps_existing_gitignore(mocker, tmp_path):
    mocker.patch('customsource.utils.files.get_project_root', return_value=tmp_path)
    workdir = tmp_path / '.customsource'
    workdir.mkdir()
    (workdir / '.gitignore').write_text('custom\n')

    init_customsource()

    assert (workdir / '.gitignore').read_text() == 'custom\n'
