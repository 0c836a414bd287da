from portfolio.image_variants import (
    CONTAINER_DIMENSIONS,
    generate_image_urls,
    generate_picture_props,
    generate_sizes,
    generate_srcset,
    get_image_dimensions,
    variant_url,
)

SRC = "https://photos.example.com/street/a.jpg"


def test_variant_url():
    assert variant_url(SRC, 640) == f"{SRC}?width=640&quality=85&format=webp"
    assert variant_url(SRC, 400, quality=70, fmt="avif") == f"{SRC}?width=400&quality=70&format=avif"


def test_srcset_lists_every_width():
    urls = generate_image_urls(SRC, (640, 1280))
    assert generate_srcset(urls) == f"{SRC}?width=640&quality=85&format=webp 640w, {SRC}?width=1280&quality=85&format=webp 1280w"


def test_sizes():
    assert generate_sizes("50vw") == "(max-width: 640px) 100vw, (max-width: 1024px) 100vw, 50vw"


def test_unknown_container_uses_gallery():
    assert get_image_dimensions("sidebar") is CONTAINER_DIMENSIONS["gallery"]


def test_picture_props_for_hero():
    props = generate_picture_props(SRC, "hero")
    assert props["width"] == 2560
    assert props["height"] == 1440
    assert props["fallback_url"] == variant_url(SRC, 2560)
    assert props["srcset"].count("w,") == 3
    assert props["sizes"].endswith("100vw")


def test_picture_props_for_lightbox_keep_width_as_height():
    props = generate_picture_props(SRC, "lightbox")
    assert props["width"] == props["height"] == 2560
