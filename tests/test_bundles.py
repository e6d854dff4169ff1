import pytest

from docugen.core.values import JsonArray, from_json
from docugen.web import BundleShapeError, bundle_resources


def test_array_of_bundles(bundle_array):
    resources = bundle_resources(bundle_array)
    assert len(resources) == 2
    assert resources.items[0] == from_json({"name": [{"given": ["A"], "family": "B"}], "birthDate": "1234-12-12"})


def test_single_bundle():
    bundle = from_json({"resourceType": "Bundle", "entry": [{"resource": {"id": "1"}}, {"resource": {"id": "2"}}]})
    assert bundle_resources(bundle) == from_json([{"id": "1"}, {"id": "2"}])


def test_bundle_without_entries():
    assert bundle_resources(from_json({"resourceType": "Bundle", "total": 0})) == JsonArray(())


@pytest.mark.parametrize(
    "document",
    [
        "not a bundle",
        [1, 2],
        {"entry": {"resource": {}}},
        {"entry": [{"fullUrl": "x"}]},
        {"entry": ["x"]},
    ],
)
def test_other_shapes_are_rejected(document):
    with pytest.raises(BundleShapeError):
        bundle_resources(from_json(document))
