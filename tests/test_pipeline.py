import json

import pytest

from imglens.core import Image, InvalidParameterError, ValidationEngine, ValidationSeverity
from imglens.lens import ParallelMaterializer
from imglens.processing import (
    FILTER_REGISTRY,
    ParameterType,
    FilterParameter,
    ProcessingExecutor,
    ProcessingPipeline,
    create_filter,
    crop,
    gaussian_blur,
    get_all_categories,
    get_filters_by_category,
    grayscale,
    resize,
)
from imglens.services import PipelineSerializer


def _filter(filter_id, **values):
    f = create_filter(filter_id)
    for name, value in values.items():
        assert f.set_parameter(name, value), name
    return f


def test_registry_covers_every_operation():
    assert set(FILTER_REGISTRY) == {
        "grayscale", "sepia", "negative", "gamma_correction", "mean_blur",
        "gaussian_blur", "kuwahara", "canny", "crop", "resize",
    }
    assert create_filter("nope") is None
    assert get_all_categories() == ["Color", "Blur", "Detection", "Geometry"]
    assert {f.filter_id for f in get_filters_by_category("Geometry")} == {"crop", "resize"}


def test_default_filters_validate():
    for filter_class in FILTER_REGISTRY.values():
        is_valid, errors = filter_class().validate_parameters()
        assert is_valid, errors


def test_parameter_validation():
    gamma = FilterParameter("Gamma", ParameterType.FLOAT, 0.0, min_val=0.0, min_exclusive=True)
    assert gamma.validate()[0] is False

    channels = FilterParameter("Channels", ParameterType.CHANNELS, "RGX")
    assert channels.validate()[0] is False

    radius = FilterParameter("Radius", ParameterType.INT, True, min_val=0)
    assert radius.validate()[0] is False

    canny = create_filter("canny")
    canny.set_parameter("low_threshold", 50.0)
    is_valid, errors = canny.validate_parameters()
    assert not is_valid
    assert "must not exceed" in errors[0]


def test_pipeline_order_management():
    pipeline = ProcessingPipeline()
    pipeline.add_filter(create_filter("grayscale"))
    pipeline.add_filter(create_filter("sepia"))
    pipeline.add_filter(create_filter("negative"))

    assert pipeline.move_filter(2, 0)
    assert [f.filter_id for f in pipeline] == ["negative", "grayscale", "sepia"]
    assert [f.order for f in pipeline] == [0, 1, 2]

    assert pipeline.remove_filter(1)
    assert [f.filter_id for f in pipeline] == ["negative", "sepia"]
    assert not pipeline.remove_filter(5)
    assert pipeline.get_filter(9) is None

    pipeline.filters[0].enabled = False
    assert [f.filter_id for f in pipeline.get_enabled_filters()] == ["sepia"]

    pipeline.clear()
    assert pipeline.is_empty()


def test_executor_applies_stages_in_order(gradient_image):
    pipeline = ProcessingPipeline()
    pipeline.add_filter(_filter("grayscale"))
    pipeline.add_filter(_filter("gaussian_blur", radius=1, sigma=1.0))
    pipeline.add_filter(_filter("crop", width=4, height=3, offset_x=2, offset_y=1))
    pipeline.add_filter(_filter("resize", width=8, height=6))

    stages = []
    result = ProcessingExecutor().execute(
        gradient_image, pipeline, on_stage=lambda i, n, f: stages.append((i, n, f.filter_id))
    )

    expected = resize(crop(gaussian_blur(grayscale(gradient_image), 1, 1.0), 4, 3, 2, 1), 8, 6)
    assert result == expected
    assert stages == [(0, 4, "grayscale"), (1, 4, "gaussian_blur"), (2, 4, "crop"), (3, 4, "resize")]


def test_executor_parallel_matches_sequential(gradient_image):
    pipeline = ProcessingPipeline()
    pipeline.add_filter(_filter("kuwahara", radius=2))
    pipeline.add_filter(_filter("canny"))

    sequential = ProcessingExecutor().execute(gradient_image, pipeline)
    parallel = ProcessingExecutor(ParallelMaterializer(3)).execute(gradient_image, pipeline)
    assert parallel == sequential


def test_executor_rejects_bad_geometry_before_any_work(gradient_image):
    calls = []
    pipeline = ProcessingPipeline()
    pipeline.add_filter(_filter("resize", width=4, height=4))
    pipeline.add_filter(_filter("crop", width=3, height=3, offset_x=2, offset_y=2))

    with pytest.raises(InvalidParameterError) as info:
        ProcessingExecutor().execute(
            gradient_image, pipeline, on_stage=lambda *args: calls.append(args)
        )
    assert calls == []
    assert info.value.issues[0].code == "INVALID_GEOMETRY"


def test_executor_rejects_invalid_parameters(gradient_image):
    pipeline = ProcessingPipeline()
    pipeline.add_filter(_filter("grayscale"))
    bad = create_filter("gamma_correction")
    bad.set_parameter("gamma", -2.0)
    pipeline.add_filter(bad)

    with pytest.raises(InvalidParameterError):
        ProcessingExecutor().execute(gradient_image, pipeline)


def test_empty_pipeline_returns_input_with_warning(gradient_image):
    pipeline = ProcessingPipeline()
    issues = ValidationEngine.validate_pipeline(pipeline, gradient_image.dimensions())

    assert [i.severity for i in issues] == [ValidationSeverity.WARNING]
    assert ProcessingExecutor().execute(gradient_image, pipeline) == gradient_image


def test_serializer_round_trip(tmp_path):
    pipeline = ProcessingPipeline()
    pipeline.add_filter(_filter("gamma_correction", gamma=2.2, channels="RGBA"))
    pipeline.add_filter(_filter("canny", low_threshold=5.0, high_threshold=30.0))
    pipeline.filters[1].enabled = False

    path = tmp_path / "nested" / "pipeline.json"
    PipelineSerializer.save_to_file(pipeline, path)
    data = json.loads(path.read_text())
    assert data["format_version"] == "1.0"

    loaded = PipelineSerializer.load_from_file(path)
    assert [f.filter_id for f in loaded] == ["gamma_correction", "canny"]
    assert loaded.filters[0].value("gamma") == 2.2
    assert loaded.filters[0].value("channels") == "RGBA"
    assert loaded.filters[1].enabled is False
    assert loaded.filters[1].value("high_threshold") == 30.0


def test_serializer_rejects_unknown_version():
    with pytest.raises(ValueError, match="Unsupported pipeline format version"):
        PipelineSerializer.deserialize({"format_version": "9.9", "pipeline": {}})


def test_serializer_rejects_unknown_filter():
    data = {"format_version": "1.0", "pipeline": {"filters": [{"filter_id": "blur9000"}]}}
    with pytest.raises(InvalidParameterError):
        PipelineSerializer.deserialize(data)


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        PipelineSerializer.load_from_file(tmp_path / "missing.json")


@pytest.mark.parametrize(
    "data",
    [
        ["grayscale"],
        {"filters": "grayscale"},
        {"filters": ["grayscale"]},
        {"filters": [{"filter_id": ["grayscale"]}]},
        {"filters": [{"filter_id": "gamma_correction", "parameters": [2.2]}]},
    ],
)
def test_from_dict_rejects_malformed_entries(data):
    with pytest.raises(InvalidParameterError):
        ProcessingPipeline.from_dict(data)


def test_pipeline_validate_reports_geometry():
    pipeline = ProcessingPipeline()
    pipeline.add_filter(_filter("crop", width=5, height=5))

    assert pipeline.validate() == []
    assert pipeline.validate((8, 8)) == []
    assert [i.code for i in pipeline.validate((4, 8))] == ["INVALID_GEOMETRY"]
