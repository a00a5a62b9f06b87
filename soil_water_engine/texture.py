"""USDA texture classification and texture-group mapping.

The classifier approximates the texture triangle with axis-aligned
thresholds on sand, clay and silt percentages. Branches are tested in
order and the first match wins, so values on a boundary resolve to the
earlier class.
"""

from soil_water_engine.logging_config import get_logger
from soil_water_engine.models import TextureClass, TextureGroup

logger = get_logger(__name__)


TEXTURE_GROUPS: dict[TextureClass, TextureGroup] = {
    TextureClass.SAND: TextureGroup.SANDY,
    TextureClass.LOAMY_SAND: TextureGroup.SANDY,
    TextureClass.SANDY_LOAM: TextureGroup.SANDY,
    TextureClass.SANDY_CLAY_LOAM: TextureGroup.SANDY,
    TextureClass.SANDY_CLAY: TextureGroup.SANDY,
    TextureClass.SILT: TextureGroup.SILTY,
    TextureClass.SILTY_LOAM: TextureGroup.SILTY,
    TextureClass.SILTY_CLAY_LOAM: TextureGroup.SILTY,
    TextureClass.SILTY_CLAY: TextureGroup.SILTY,
    TextureClass.LOAM: TextureGroup.CLAYEY,
    TextureClass.CLAY_LOAM: TextureGroup.CLAYEY,
    TextureClass.CLAY: TextureGroup.CLAYEY,
}


def classify_texture(sand: float, clay: float) -> TextureClass:
    """Classify soil texture from sand and clay percentages.

    Args:
        sand: Sand percentage (0-100)
        clay: Clay percentage (0-100)

    Returns:
        One of the twelve USDA texture classes
    """
    silt = 100.0 - sand - clay

    if clay >= 40:
        if sand > 45:
            texture = TextureClass.SANDY_CLAY
        elif silt > 40:
            texture = TextureClass.SILTY_CLAY
        else:
            texture = TextureClass.CLAY

    elif clay >= 27:
        if sand > 45:
            texture = TextureClass.SANDY_CLAY_LOAM
        elif silt > 40:
            texture = TextureClass.SILTY_CLAY_LOAM
        else:
            texture = TextureClass.CLAY_LOAM

    elif clay < 12 and silt < 50:
        texture = TextureClass.SAND if sand >= 85 else TextureClass.LOAMY_SAND

    # clay < 27 from here on
    elif sand > 52:
        texture = TextureClass.SANDY_LOAM

    elif clay < 12 and silt >= 80:
        texture = TextureClass.SILT

    elif silt >= 50:
        texture = TextureClass.SILTY_LOAM

    else:
        texture = TextureClass.LOAM

    logger.debug(
        f"Classified sand={sand}, clay={clay}, silt={silt} as {texture.value}"
    )
    return texture


def texture_group(texture_class: TextureClass | str) -> TextureGroup:
    """Map a texture class onto its calibration-table group."""
    return TEXTURE_GROUPS[TextureClass(texture_class)]
