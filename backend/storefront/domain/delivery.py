"""Regional delivery-fee lookup.

Pure domain functions over a fixed fee table (KSh, Nairobi and environs).
Regions are grouped by the arterial road a rider takes out of the CBD.
"""

from dataclasses import asdict, dataclass

from storefront.core.exceptions import NotFoundError, ValidationError


@dataclass(frozen=True)
class DeliveryRegion:
    name: str
    charge: int
    area: str
    note: str | None = None


AREAS: tuple[str, ...] = (
    "Nairobi CBD",
    "Ngong Road",
    "Limuru Road",
    "Waiyaki Way",
    "Langata Road",
    "Mombasa Road",
    "Thika Road",
    "Jogoo Road",
    "Kiambu Road",
)

DELIVERY_REGIONS: tuple[DeliveryRegion, ...] = (
    # CBD
    DeliveryRegion("CBD Errands", 100, "Nairobi CBD"),
    DeliveryRegion("Pickup Shelf", 0, "Nairobi CBD", note="Dynamic Mall 5th Floor Shop Ml212"),
    # Ngong Road
    DeliveryRegion("Upperhill", 300, "Ngong Road"),
    # Limuru Road
    DeliveryRegion("Hurlingham", 300, "Limuru Road"),
    DeliveryRegion("Ngara", 250, "Limuru Road"),
    DeliveryRegion("Mbagathi", 300, "Limuru Road"),
    DeliveryRegion("Parklands", 300, "Limuru Road"),
    DeliveryRegion("Yaya Center", 300, "Limuru Road"),
    DeliveryRegion("Kilimani", 300, "Limuru Road"),
    DeliveryRegion("Kileleshwa", 300, "Limuru Road"),
    DeliveryRegion("Muthaiga", 350, "Limuru Road"),
    DeliveryRegion("Karura", 350, "Limuru Road"),
    DeliveryRegion("Lavington", 350, "Limuru Road"),
    DeliveryRegion("Riara/Adams", 350, "Limuru Road"),
    DeliveryRegion("Racecourse", 400, "Limuru Road"),
    DeliveryRegion("Gigiri/V. Market", 450, "Limuru Road"),
    DeliveryRegion("Roseline", 450, "Limuru Road"),
    DeliveryRegion("Ruaka", 500, "Limuru Road"),
    DeliveryRegion("Banana", 600, "Limuru Road"),
    DeliveryRegion("Ngong", 800, "Limuru Road"),
    # Waiyaki Way / Westlands
    DeliveryRegion("Wayaki Way", 300, "Waiyaki Way"),
    DeliveryRegion("Westland", 300, "Waiyaki Way"),
    DeliveryRegion("Spring Valley", 300, "Waiyaki Way"),
    DeliveryRegion("N. West/Madaraka", 300, "Waiyaki Way"),
    DeliveryRegion("Loresho/Kangemi", 300, "Waiyaki Way"),
    DeliveryRegion("Wilson/Carnivore", 300, "Waiyaki Way"),
    # Langata Road
    DeliveryRegion("Langata Rd", 300, "Langata Road"),
    DeliveryRegion("M.View", 350, "Langata Road"),
    DeliveryRegion("Langata", 450, "Langata Road"),
    DeliveryRegion("Bomas", 450, "Langata Road"),
    DeliveryRegion("Uthiru/L. Kabete", 450, "Langata Road"),
    DeliveryRegion("Karen", 500, "Langata Road"),
    DeliveryRegion("Muthiga/Regen", 500, "Langata Road"),
    DeliveryRegion("Kitsuru", 600, "Langata Road"),
    DeliveryRegion("Kikuyu", 650, "Langata Road"),
    DeliveryRegion("Kiserian", 650, "Langata Road"),
    DeliveryRegion("Rongai", 700, "Langata Road"),
    DeliveryRegion("Sigona", 900, "Langata Road"),
    # Mombasa Road
    DeliveryRegion("South B/C", 300, "Mombasa Road"),
    DeliveryRegion("Imara", 350, "Mombasa Road"),
    DeliveryRegion("GM/Industrial Area", 350, "Mombasa Road"),
    DeliveryRegion("Syokimau", 500, "Mombasa Road"),
    DeliveryRegion("Cabanas", 600, "Mombasa Road"),
    DeliveryRegion("JKIA", 650, "Mombasa Road"),
    DeliveryRegion("Katani", 700, "Mombasa Road"),
    DeliveryRegion("Mlolongo", 800, "Mombasa Road"),
    DeliveryRegion("Athi River/Kitengela", 900, "Mombasa Road"),
    # Thika Road
    DeliveryRegion("Pangani", 250, "Thika Road"),
    DeliveryRegion("Eastleigh", 300, "Thika Road"),
    DeliveryRegion("Airtel/Panari", 350, "Thika Road"),
    DeliveryRegion("Allsoaps", 400, "Thika Road"),
    DeliveryRegion("Mwiki/Kahawa", 500, "Thika Road"),
    DeliveryRegion("Kasarani", 600, "Thika Road"),
    DeliveryRegion("KU", 650, "Thika Road"),
    DeliveryRegion("Ruiru", 800, "Thika Road"),
    DeliveryRegion("Juja", 900, "Thika Road"),
    DeliveryRegion("Thika", 1000, "Thika Road"),
    # Jogoo Road
    DeliveryRegion("City Stadium", 300, "Jogoo Road"),
    DeliveryRegion("Uchumi/Makadara", 300, "Jogoo Road"),
    DeliveryRegion("Donholm/Pipeline", 400, "Jogoo Road"),
    # Kiambu Road
    DeliveryRegion("Muthaiga (Kiambu Rd)", 350, "Kiambu Road"),
    DeliveryRegion("Runda", 400, "Kiambu Road"),
    DeliveryRegion("N. Bypass", 400, "Kiambu Road"),
    DeliveryRegion("Ridgeways", 600, "Kiambu Road"),
    DeliveryRegion("Thindigua", 800, "Kiambu Road"),
)

_BY_NAME = {region.name.casefold(): region for region in DELIVERY_REGIONS}


def list_regions() -> list[dict]:
    return [asdict(region) for region in DELIVERY_REGIONS]


def regions_by_area() -> list[dict]:
    """Regions grouped under their area, areas in display order, empty areas skipped."""
    groups = []
    for area in AREAS:
        members = [asdict(r) for r in DELIVERY_REGIONS if r.area == area]
        if members:
            groups.append({"area": area, "regions": members})
    return groups


def get_region(name: str) -> DeliveryRegion:
    """Case-insensitive lookup by region name."""
    region = _BY_NAME.get(name.strip().casefold())
    if region is None:
        raise NotFoundError(f"Unknown delivery region: {name}")
    return region


def quote(region_name: str, subtotal: float = 0) -> dict:
    """Delivery fee and order total for a region."""
    if subtotal < 0:
        raise ValidationError("Subtotal must not be negative")
    region = get_region(region_name)
    return {
        "region": region.name,
        "area": region.area,
        "deliveryFee": region.charge,
        "subtotal": subtotal,
        "total": subtotal + region.charge,
    }
