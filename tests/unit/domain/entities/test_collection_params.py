import dataclasses

import pytest

from collectionkit.domain.entities.collection_params import CollectionParams


def test_client_params_omit_indices():
    params = CollectionParams(name="myColl", options={"local_only": True})

    assert params.as_dict() == {
        "name": "myColl",
        "mixins": [],
        "options": {"local_only": True},
    }


def test_server_params_include_indices():
    params = CollectionParams(name="myColl", indices=[{"field": 1}])

    assert params.as_dict() == {
        "name": "myColl",
        "indices": [{"field": 1}],
        "mixins": [],
        "options": {},
    }


def test_params_are_frozen():
    params = CollectionParams(name="myColl")

    with pytest.raises(dataclasses.FrozenInstanceError):
        params.name = "other"
