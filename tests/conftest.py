import pytest

from HandData import Landmark

# Synthetic right hand, palm to camera, fingers up (image y grows downward).
# Palm size (wrist -> middle MCP) is 0.2.
WRIST = (0.5, 0.8)
MCPS = {
    "index": (5, (0.44, 0.62)),
    "middle": (9, (0.50, 0.60)),
    "ring": (13, (0.56, 0.61)),
    "pinky": (17, (0.61, 0.63)),
}
EXTENDED = ((0.0, -0.06), (0.0, -0.10), (0.0, -0.14))
CURLED = ((0.0, -0.05), (0.0, -0.02), (0.0, 0.02))

# thumb CMC, MCP, IP, TIP
THUMBS = {
    "out": ((0.42, 0.76), (0.36, 0.71), (0.31, 0.67), (0.24, 0.62)),
    "tucked": ((0.42, 0.76), (0.38, 0.72), (0.42, 0.68), (0.47, 0.66)),
    "side": ((0.42, 0.76), (0.37, 0.72), (0.35, 0.69), (0.36, 0.66)),
    "upright": ((0.42, 0.76), (0.38, 0.70), (0.39, 0.64), (0.40, 0.58)),
    "over": ((0.42, 0.76), (0.40, 0.70), (0.46, 0.63), (0.53, 0.60)),
    "low": ((0.42, 0.76), (0.38, 0.72), (0.40, 0.70), (0.42, 0.68)),
    "past_ring": ((0.42, 0.76), (0.45, 0.72), (0.52, 0.68), (0.58, 0.66)),
    "past_middle": ((0.42, 0.76), (0.45, 0.74), (0.50, 0.73), (0.55, 0.72)),
    "between": ((0.42, 0.76), (0.40, 0.70), (0.44, 0.63), (0.47, 0.57)),
    "o_touch": ((0.42, 0.76), (0.36, 0.70), (0.32, 0.62), (0.31, 0.55)),
    "c_gap": ((0.42, 0.76), (0.36, 0.72), (0.32, 0.69), (0.30, 0.66)),
}

# index PIP, DIP, TIP for bent-but-open index shapes
CURVED_INDEX = {6: (0.44, 0.48), 7: (0.36, 0.45), 8: (0.30, 0.50)}
HOOKED_INDEX = {6: (0.44, 0.50), 7: (0.42, 0.47), 8: (0.40, 0.47)}


def build_hand(extended=(), thumb="side", overrides=None):
    pts = [None] * 21
    pts[0] = WRIST
    for i, p in enumerate(THUMBS[thumb], start=1):
        pts[i] = p
    for name, (mcp_idx, (mx, my)) in MCPS.items():
        pts[mcp_idx] = (mx, my)
        offsets = EXTENDED if name in extended else CURLED
        for j, (dx, dy) in enumerate(offsets, start=1):
            pts[mcp_idx + j] = (round(mx + dx, 4), round(my + dy, 4))
    for idx, p in (overrides or {}).items():
        pts[idx] = p
    return [Landmark(x, y, 0.0) for x, y in pts]


ALL = ("index", "middle", "ring", "pinky")

SHAPES = {
    "5": dict(extended=ALL, thumb="out"),
    "4": dict(extended=ALL, thumb="tucked"),
    "W": dict(extended=("index", "middle", "ring"), thumb="tucked"),
    "F": dict(extended=("middle", "ring", "pinky"), thumb="tucked"),
    "OK": dict(extended=("middle", "ring", "pinky"), thumb="out"),
    "3": dict(extended=("index", "middle"), thumb="out"),
    "K": dict(extended=("index", "middle"), thumb="between"),
    "R": dict(extended=("index", "middle"), thumb="side", overrides={8: (0.52, 0.47), 12: (0.47, 0.46)}),
    "U": dict(extended=("index", "middle"), thumb="side"),
    "V": dict(extended=("index", "middle"), thumb="side", overrides={8: (0.40, 0.48), 12: (0.54, 0.46)}),
    "L": dict(extended=("index",), thumb="out"),
    "D": dict(extended=("index",), thumb="tucked"),
    "1": dict(extended=("index",), thumb="side"),
    "Y": dict(extended=("pinky",), thumb="out"),
    "I": dict(extended=("pinky",), thumb="side"),
    "O": dict(thumb="o_touch", overrides=CURVED_INDEX),
    "C": dict(thumb="c_gap", overrides=CURVED_INDEX),
    "X": dict(thumb="upright", overrides=HOOKED_INDEX),
    "S": dict(thumb="over"),
    "T": dict(thumb="tucked"),
    "E": dict(thumb="low"),
    "M": dict(thumb="past_ring"),
    "N": dict(thumb="past_middle"),
    "A": dict(thumb="upright"),
}


def shape(label):
    return build_hand(**SHAPES[label])


def mirror(landmarks):
    return [Landmark(1.0 - p.x, p.y, p.z) for p in landmarks]


def scale_about_wrist(landmarks, k):
    w = landmarks[0]
    return [Landmark(w.x + k * (p.x - w.x), w.y + k * (p.y - w.y), w.z + k * (p.z - w.z)) for p in landmarks]


def translate(landmarks, dx=0.0, dy=0.0):
    return [Landmark(p.x + dx, p.y + dy, p.z) for p in landmarks]


@pytest.fixture
def make_hand():
    return build_hand


@pytest.fixture
def hand_shape():
    return shape


@pytest.fixture
def shape_labels():
    return list(SHAPES)


@pytest.fixture
def mirror_hand():
    return mirror


@pytest.fixture
def scale_hand():
    return scale_about_wrist


@pytest.fixture
def translate_hand():
    return translate
