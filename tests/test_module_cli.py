import json
from unittest.mock import MagicMock, mock_open, patch

import pytest

from geodetect import __main__
from geodetect.__main__ import GeodetectClient, parse_args
from geodetect.exceptions import APIError


def _fake__init__(s):
    s.base_url = 'www.example.com'


@pytest.fixture(autouse=True)
def fake_client(monkeypatch):
    monkeypatch.setattr(GeodetectClient, '__init__', _fake__init__)


def test_parser_arg_errors(capsys):
    # SystemExit does not inherit from Exception
    with pytest.raises(BaseException):
        parse_args(['-foobar', '-spam'])
    captured = capsys.readouterr()
    assert 'unrecognized arguments' in captured.err
    assert 'foobar' in captured.err


def test_no_command_prints_help(capsys):
    parse_args([])
    assert 'usage: geodetect' in capsys.readouterr().out


def test_subcommand_missing_prints_help(capsys):
    parse_args(['delete'])
    assert 'usage: geodetect delete' in capsys.readouterr().out


def test_rasters_list(monkeypatch):
    mock_rasterlist = MagicMock(return_value=['foo', 'bar'])
    monkeypatch.setattr(GeodetectClient, 'list_rasters', mock_rasterlist)
    parse_args(['list', 'rasters'])
    mock_rasterlist.assert_called_with(None, None)
    parse_args(['list', 'rasters', '--folder', 'foobar', '--search', 'spam'])
    mock_rasterlist.assert_called_with('foobar', 'spam')


def test_rasters_list_output_format(monkeypatch, capsys):
    mock_rasterlist = MagicMock(return_value=[{'id': 4, 'name': 'foo'}, {'id': 5, 'name': 'bar'}])
    monkeypatch.setattr(GeodetectClient, 'list_rasters', mock_rasterlist)
    # JSON
    for a in ['list', 'rasters'], ['list', 'rasters', '--output', 'json']:
        parse_args(a)
        assert json.loads(capsys.readouterr().out) == [{"id": 4, "name": "foo"}, {"id": 5, "name": "bar"}]
    # IDs only
    parse_args(['list', 'rasters', '--output', 'ids_only'])
    assert capsys.readouterr().out == '4\n5\n'


def test_detectors_list(monkeypatch, capsys):
    mock_detectorslist = MagicMock(return_value=[{'id': 'foo'}])
    monkeypatch.setattr(GeodetectClient, 'list_detectors', mock_detectorslist)
    parse_args(['list', 'detectors', '--search', 'cows'])
    mock_detectorslist.assert_called_with('cows')
    assert json.loads(capsys.readouterr().out) == [{'id': 'foo'}]


def test_prediction(monkeypatch, capsys):
    mock_run = MagicMock(return_value='foobar')
    mock_download_file = MagicMock()
    mock_url = MagicMock(return_value='spam')
    monkeypatch.setattr(GeodetectClient, 'run_detector', mock_run)
    monkeypatch.setattr(GeodetectClient, 'download_result_to_file', mock_download_file)
    monkeypatch.setattr(GeodetectClient, 'get_operation_results_url', mock_url)
    with pytest.raises(BaseException):
        parse_args(['detect', 'my_raster_id'])
    captured = capsys.readouterr()
    assert 'following arguments are required' in captured.err
    assert 'detector' in captured.err
    assert (mock_run.called or mock_download_file.called or mock_url.called) is False
    # Print URL
    parse_args(['detect', 'my_raster_id', 'my_detector_id'])
    mock_run.assert_called_with('my_detector_id', 'my_raster_id')
    assert capsys.readouterr().out == 'spam\n'
    assert mock_download_file.called is False
    # Write result to file
    parse_args(['detect', 'my_raster_id', 'my_detector_id', '--output-file', 'a_path'])
    assert capsys.readouterr().out == ''
    mock_download_file.assert_called_with('foobar', 'a_path')


def test_train(monkeypatch, capsys):
    mock_train = MagicMock()
    monkeypatch.setattr(GeodetectClient, 'train_detector', mock_train)
    with pytest.raises(BaseException):
        parse_args(['train'])
    captured = capsys.readouterr()
    assert 'following arguments are required' in captured.err
    assert mock_train.called is False
    parse_args(['train', 'my_detector_id'])
    mock_train.assert_called_with('my_detector_id')


def test_create_detector(monkeypatch, capsys):
    mock_create_detector, mock_add_raster = MagicMock(return_value='spam'), MagicMock()
    monkeypatch.setattr(GeodetectClient, 'create_detector', mock_create_detector)
    monkeypatch.setattr(GeodetectClient, 'add_raster_to_detector', mock_add_raster)
    parse_args(['create', 'detector'])
    mock_create_detector.assert_called_with(None, 'count', 'polygon', 500)
    assert mock_add_raster.call_count == 0
    assert capsys.readouterr().out == 'spam\n'
    parse_args([
        'create', 'detector',
        '--output-type', 'bbox', '--detection-type', 'segmentation',
        '--raster', 'foo', '--training-steps', '888',
        '--name', 'foobar'])
    mock_create_detector.assert_called_with('foobar', 'segmentation', 'bbox', 888)
    mock_add_raster.assert_called_once_with('foo', 'spam')


def test_create_detector_training_steps_out_of_range(monkeypatch, capsys):
    mock_create_detector = MagicMock()
    monkeypatch.setattr(GeodetectClient, 'create_detector', mock_create_detector)
    with pytest.raises(SystemExit):
        parse_args(['create', 'detector', '--training-steps', '40001'])
    assert 'training-steps' in capsys.readouterr().err
    assert mock_create_detector.called is False


def test_create_raster(monkeypatch, capsys):
    mock_create_raster, mock_add_raster = MagicMock(return_value='spam'), MagicMock()
    monkeypatch.setattr(GeodetectClient, 'upload_raster', mock_create_raster)
    monkeypatch.setattr(GeodetectClient, 'add_raster_to_detector', mock_add_raster)
    with pytest.raises(BaseException):
        parse_args(['create', 'raster'])
    captured = capsys.readouterr()
    assert 'following arguments are required' in captured.err
    assert 'path' in captured.err
    assert mock_create_raster.called is False
    parse_args(['create', 'raster', 'my_path_to_tiff'])
    mock_create_raster.assert_called_with('my_path_to_tiff', None, None)
    assert mock_add_raster.called is False
    parse_args([
        'create', 'raster', 'my_path_to_tiff', '--name', 'beacon', '--folder', 'eggs',
        '--detector', 'a', 'b', 'c'
    ])
    mock_create_raster.assert_called_with('my_path_to_tiff', 'beacon', 'eggs')
    assert mock_add_raster.call_count == 3
    mock_add_raster.assert_called_with('spam', 'c')


def test_create_annotation(monkeypatch, capsys):
    mock_set_annotations = MagicMock()
    monkeypatch.setattr(GeodetectClient, 'set_annotations', mock_set_annotations)
    with pytest.raises(BaseException):
        parse_args(['create', 'annotation'])
    captured = capsys.readouterr()
    assert 'following arguments are required' in captured.err
    assert mock_set_annotations.called is False
    with patch("builtins.open", mock_open(read_data='{"a":3}')):
        parse_args([
            'create', 'annotation', 'path/to/open', 'my_raster', 'my_detector',
            'training_area'
        ])
    mock_set_annotations.assert_called_with(
        'my_detector', 'my_raster', 'training_area', {"a": 3})


def test_create_detectionarea(monkeypatch):
    mock_set_detectionarea = MagicMock()
    monkeypatch.setattr(
        GeodetectClient, 'set_raster_detection_areas_from_file', mock_set_detectionarea)
    parse_args(['create', 'detection_area', 'path/to/open', 'my_raster'])
    mock_set_detectionarea.assert_called_with('my_raster', 'path/to/open')


@pytest.mark.parametrize("kind,method", [
    ('raster', 'delete_raster'),
    ('detector', 'delete_detector'),
    ('detection_area', 'remove_raster_detection_areas'),
])
def test_delete(monkeypatch, capsys, kind, method):
    mock_delete = MagicMock()
    monkeypatch.setattr(GeodetectClient, method, mock_delete)
    with pytest.raises(BaseException):
        parse_args(['delete', kind])
    assert 'following arguments are required' in capsys.readouterr().err
    assert mock_delete.called is False
    parse_args(['delete', kind, 'my_id'])
    mock_delete.assert_called_with('my_id')


def test_main_api_error(monkeypatch):
    monkeypatch.setattr(GeodetectClient, 'train_detector', MagicMock(side_effect=APIError('Boom')))
    monkeypatch.setattr(__main__.sys, 'argv', ['geodetect', 'train', 'my_detector_id'])
    with pytest.raises(SystemExit) as e:
        __main__.main()
    assert 'Boom' in str(e.value.code)
