"""Legacy bridges for paths that are mid-migration.

A bridge is consulted only when the canonical location is empty, and every
use is reported as a LEGACY_PATH_USED event so migration progress stays
visible.
"""

from switchyard.wiring.models.bridges import BridgeSet, LegacyBridge, SlotAttributeExtractor

FRONT_DESK = "aiAgentSettings.frontDeskBehavior"
SLOTS = f"{FRONT_DESK}.bookingSlots"
LEGACY_ADDRESS = "aiAgentSettings.frontDesk.booking.addressVerification"


def _address_slot(path: str, attribute: str, not_equal_to: str | None = None) -> LegacyBridge:
    description = f"bookingSlots[address].{attribute}"
    if not_equal_to is not None:
        description += f' != "{not_equal_to}"'
    return LegacyBridge(
        path=f"booking.addressVerification.{path}",
        legacy_storage_path=SLOTS,
        extractor=SlotAttributeExtractor(
            slot_type="address", attribute=attribute, not_equal_to=not_equal_to
        ),
        description=description,
        migration_note=f"Move to booking.addressVerification.{path}",
    )


def _old_address_block(key: str) -> LegacyBridge:
    return LegacyBridge(
        path=f"booking.addressVerification.{key}",
        legacy_storage_path=f"{LEGACY_ADDRESS}.{key}",
        description=f"frontDesk.booking.addressVerification.{key}",
        migration_note=f"Move to frontDeskBehavior.booking.addressVerification.{key}",
    )


BRIDGES = BridgeSet(
    bridges=(
        # Address verification used to be configured on the address slot itself
        _address_slot("enabled", "useGoogleMapsValidation"),
        _address_slot("requireUnitQuestion", "unitNumberMode", not_equal_to="never"),
        _address_slot("unitQuestionMode", "unitNumberMode"),
        _address_slot("unitTypePrompt", "unitNumberPrompt"),
        # ...and before that under aiAgentSettings.frontDesk
        LegacyBridge(
            path="booking.addressVerification",
            legacy_storage_path=LEGACY_ADDRESS,
            description="frontDesk.booking.addressVerification",
            migration_note="Move to frontDeskBehavior.booking.addressVerification",
        ),
        _old_address_block("provider"),
        _old_address_block("requireCity"),
        _old_address_block("requireState"),
        _old_address_block("requireZip"),
        _old_address_block("missingCityStatePrompt"),
        LegacyBridge(
            path="frontDesk.discoveryConsent.consentPhrases",
            legacy_storage_path=f"{FRONT_DESK}.discoveryConsent.consentYesWords",
            description="discoveryConsent.consentYesWords",
            migration_note="Rename consentYesWords to consentPhrases",
        ),
    )
)
