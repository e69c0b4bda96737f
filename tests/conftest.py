# tests/conftest.py
"""
Shared fixtures for the Spine2D Json Tools test suite.

## Fixture Categories
- **Documents**: small but complete Spine JSON documents (bones, slots, skins with every
  attachment type, animations, constraints) returned as fresh dicts for every test.
- **Logging**: cleanup of handlers installed by `setup_logging()`.
"""
import os
import sys
import copy
import logging
import pytest

project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, project_root)


# =============================================================================
# SAMPLE DOCUMENTS
# =============================================================================

BODY_DOCUMENT = {
    "skeleton": {"hash": "abc123", "spine": "3.8.75", "images": "./images/", "audio": ""},
    "bones": [
        {"name": "root"},
        {"name": "hip", "parent": "root", "y": 100},
        {"name": "torso", "parent": "hip", "rotation": 90, "x": 10},
        {"name": "head", "parent": "torso", "x": 50, "transform": "noScale"},
        {"name": "leg", "parent": "hip", "rotation": -90},
    ],
    "slots": [
        {"name": "leg", "bone": "leg", "attachment": "leg"},
        {"name": "body", "bone": "torso", "attachment": "body"},
        {"name": "head", "bone": "head", "color": "ffffffff", "attachment": "face"},
        {"name": "clip", "bone": "root", "attachment": "clip"},
    ],
    "ik": [
        {"name": "leg-ik", "order": 0, "bones": ["leg"], "target": "hip", "mix": 0.5}
    ],
    "transform": [
        {
            "name": "head-follow",
            "order": 2,
            "bones": ["head"],
            "target": "torso",
            "rotateMix": 1,
            "translateMix": 0,
            "scaleMix": 0,
            "shearMix": 0,
        }
    ],
    "path": [
        {"name": "spine-path", "order": 1, "bones": ["torso"], "target": "body"}
    ],
    "skins": [
        {
            "name": "default",
            "attachments": {
                "body": {
                    "body": {
                        "type": "mesh",
                        "path": "body",
                        "uvs": [0, 0, 1, 0, 1, 1],
                        "triangles": [0, 1, 2],
                        # 3 vertices: two bound to torso/hip, one to head
                        "vertices": [
                            2, 2, 10.5, 20.25, 0.75, 1, -3.5, 4, 0.25,
                            1, 2, 7, 8, 1,
                            1, 3, -1.5, 2.5, 1,
                        ],
                        "hull": 3,
                        "edges": [0, 2, 2, 4, 4, 0],
                        "width": 64,
                        "height": 32,
                    },
                    "body-path": {
                        "type": "path",
                        "lengths": [100],
                        "vertexCount": 2,
                        "vertices": [1, 2, 0, 0, 1, 1, 4, 30, 40, 1],
                    },
                },
                "head": {
                    "face": {"x": 1, "y": 2, "rotation": 0, "width": 40, "height": 40},
                    "face-alt": {
                        "type": "linkedmesh",
                        "parent": "body",
                        "width": 64,
                        "height": 32,
                    },
                },
                "leg": {
                    "leg": {
                        "type": "mesh",
                        "path": "leg",
                        "uvs": [0, 0, 1, 0, 1, 1, 0, 1],
                        "triangles": [0, 1, 2, 2, 3, 0],
                        # unweighted quad, integral coordinates
                        "vertices": [0, 0, 10, 0, 10, 10, 0, 10],
                        "hull": 4,
                        "width": 10,
                        "height": 10,
                    }
                },
                "clip": {
                    "clip": {
                        "type": "clipping",
                        "end": "head",
                        "vertexCount": 3,
                        "vertices": [0, 0, 100, 0, 50, 80],
                        "color": "ce3a3aff",
                    }
                },
            },
        }
    ],
    "events": {"step": {"int": 1}},
    "animations": {
        "walk": {
            "bones": {
                "hip": {
                    "rotate": [{"time": 0.5, "angle": 10, "curve": 0.25, "c3": 0.75}],
                    "translate": [{"x": 0, "y": 0}, {"time": 1, "x": 5, "y": 0}],
                },
                "leg": {"scale": [{"time": 0.25, "x": 1.1, "y": 1}]},
            },
            "slots": {
                "head": {
                    "attachment": [{"time": 0.2, "name": "face-alt"}, {"time": 0.4, "name": None}],
                    "color": [{"time": 0.1, "color": "ff0000ff"}],
                }
            },
            "deform": {
                "default": {
                    "body": {"body": [{"time": 0.75, "offset": 2, "vertices": [1, 2]}]}
                }
            },
            "drawOrder": [
                {"time": 0.3, "offsets": [{"slot": "head", "offset": -1}]}
            ],
            "transform": {"head-follow": [{"time": 0.1, "rotateMix": 0.5}]},
            "ik": {"leg-ik": [{"time": 0.1, "mix": 0.2}]},
            "path": {"spine-path": {"position": [{"time": 0.6, "position": 0.5}]}},
        },
        "idle": {"bones": {"torso": {"rotate": [{"angle": 0}, {"time": 2, "angle": 5}]}}},
    },
}

TAIL_DOCUMENT = {
    "skeleton": {"hash": "tail999", "spine": "3.8.75", "images": "./tail/", "audio": ""},
    "bones": [
        {"name": "root"},
        {"name": "tail", "parent": "root", "x": -20},
        {"name": "tail-tip", "parent": "tail", "x": -15},
    ],
    "slots": [
        {"name": "tail", "bone": "tail", "attachment": "tail"},
    ],
    "ik": [{"name": "tail-ik", "bones": ["tail"], "target": "tail-tip"}],
    "transform": [
        {"name": "tail-follow", "order": 1, "bones": ["tail-tip"], "target": "tail"}
    ],
    "skins": [
        {
            "name": "default",
            "attachments": {
                "tail": {
                    "tail": {
                        "type": "mesh",
                        "path": "tail",
                        "uvs": [0, 0, 1, 0, 1, 1],
                        "triangles": [0, 1, 2],
                        "vertices": [1, 1, 0, 0, 1, 1, 2, 5, 5, 1, 2, 1, 3, 3, 0.5, 2, 4, 4, 0.5],
                        "hull": 3,
                        "width": 16,
                        "height": 16,
                    }
                }
            },
        },
        {"name": "spiky", "attachments": {"tail": {"spike": {"width": 4, "height": 4}}}},
    ],
    "events": {"swish": {"float": 0.5}},
    "animations": {
        "wag": {"bones": {"tail": {"rotate": [{"angle": 0}, {"time": 0.5, "angle": 20}]}}}
    },
}


@pytest.fixture
def body_raw():
    """Fresh copy of the sample body document."""
    return copy.deepcopy(BODY_DOCUMENT)


@pytest.fixture
def tail_raw():
    """Fresh copy of the sample tail document (no bone/slot overlap with body)."""
    return copy.deepcopy(TAIL_DOCUMENT)


@pytest.fixture
def minimal_raw():
    return {
        "skeleton": {"hash": "min", "spine": "3.8.75"},
        "bones": [{"name": "root"}, {"name": "hip", "parent": "root"}],
        "slots": [{"name": "s1", "bone": "hip"}],
        "skins": [{"name": "default", "attachments": {}}],
    }


@pytest.fixture
def body_doc(body_raw):
    from Spine2D_Json_Tools.document import SpineDocument

    return SpineDocument(body_raw)


@pytest.fixture
def tail_doc(tail_raw):
    from Spine2D_Json_Tools.document import SpineDocument

    return SpineDocument(tail_raw)


# =============================================================================
# LOGGING
# =============================================================================


@pytest.fixture(autouse=True)
def clean_package_logger():
    """Removes handlers installed on the package logger by setup_logging() during a test."""
    yield logging.getLogger("Spine2D_Json_Tools")
    pkg_logger = logging.getLogger("Spine2D_Json_Tools")
    # console handlers may point at a capture stream pytest already closed
    for h in pkg_logger.handlers[:]:
        h.close()
        pkg_logger.removeHandler(h)
    pkg_logger.propagate = True
    pkg_logger.setLevel(logging.NOTSET)
