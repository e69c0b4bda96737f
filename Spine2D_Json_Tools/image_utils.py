# image_utils.py
"""
Image helpers for textures exported by Spine.

Spine can export atlas pages with premultiplied alpha. `unpremultiply_alpha` restores straight
alpha: every colour channel of a pixel with alpha > 0 is divided by alpha / 255, floored and
clamped to 255. Alpha itself and fully transparent pixels are left unchanged.
"""
from __future__ import annotations

import logging

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)


def unpremultiply_pixels(rgba: np.ndarray) -> np.ndarray:
    """Returns an un-premultiplied copy of an (..., 4) uint8 RGBA array."""
    pixels = rgba.astype(np.float64)
    alpha = pixels[..., 3:4] / 255.0
    visible = alpha[..., 0] > 0
    colors = pixels[..., :3]
    divided = np.floor(
        np.minimum(colors / np.where(alpha > 0, alpha, 1.0), 255.0)
    )
    colors[visible] = divided[visible]
    return pixels.astype(np.uint8)


def unpremultiply_alpha(input_path: str, output_path: str) -> None:
    with Image.open(input_path) as img:
        rgba = np.asarray(img.convert("RGBA"))
    result = unpremultiply_pixels(rgba)
    Image.fromarray(result).save(output_path)
    logger.info(f"[unpremultiply_alpha] {input_path} -> {output_path}")
