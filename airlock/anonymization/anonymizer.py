"""Replace detected PII with stable, typed placeholders.

Processing flow:
1. For each match (sorted, non-overlapping), look up the value in the
   mapping's reverse index (raw value first, then the spacing-free variant
   for names).
2. On a miss, mint ``[TYPE_NNN]`` from the category counter and register it
   right away so later occurrences in the same text reuse it.
3. Join the untouched gaps of the original text with the placeholders,
   left to right, so match offsets taken against the original stay valid.
4. For YAML targets, quote scalars that now start with a placeholder.
"""

from airlock.anonymization.exceptions import AnonymizationError
from airlock.anonymization.models import AnonymizationResult
from airlock.anonymization.yaml_quoting import quote_leading_placeholders
from airlock.detection.models import Match, PIIType
from airlock.logging.logger import Log
from airlock.mapping.models import MappingEntry, SessionMapping
from airlock.mapping.placeholders import format_placeholder

_MAX_PLACEHOLDER_NUMBER = 999


class Anonymizer:
    """Turns matches into placeholders against a session mapping."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def anonymize(
        self,
        text: str,
        matches: list[Match],
        mapping: SessionMapping,
        document_uri: str,
        structural_mode: bool = False,
    ) -> AnonymizationResult:
        """Replace every match in *text* with its placeholder.

        Args:
            text: Text the matches were detected in.
            matches: Matches sorted by start offset, non-overlapping.
            mapping: Session mapping; grown in place with new entries.
            document_uri: Identifier of the source document.
            structural_mode: Run the YAML quoting pass on the result.

        Returns:
            AnonymizationResult with the rewritten text and the entries
            minted by this call.

        Raises:
            AnonymizationError: if the matches violate the ordering contract
                                or rewriting fails unexpectedly.
        """
        try:
            return self._run(text, matches, mapping, document_uri, structural_mode)
        except AnonymizationError:
            raise
        except Exception as exc:
            raise AnonymizationError(f"Anonymization failed: {exc}") from exc

    def anonymize_single_value(
        self,
        value: str,
        pii_type: PIIType,
        mapping: SessionMapping,
        document_uri: str,
    ) -> tuple[str, MappingEntry | None]:
        """Placeholder for one value, bypassing detection.

        Returns:
            (placeholder, entry) where entry is None if *value* was already
            mapped.
        """
        return self._resolve(value, pii_type, mapping, document_uri)

    # ------------------------------------------------------------------
    # Pipeline steps
    # ------------------------------------------------------------------

    def _run(
        self,
        text: str,
        matches: list[Match],
        mapping: SessionMapping,
        document_uri: str,
        structural_mode: bool,
    ) -> AnonymizationResult:
        new_entries: list[MappingEntry] = []
        pieces: list[str] = []
        previous_end = 0

        for match in matches:
            if match.start < previous_end:
                raise AnonymizationError(
                    f"Matches must be sorted and non-overlapping (offset {match.start})"
                )
            placeholder, entry = self._resolve(match.value, match.type, mapping, document_uri)
            if entry is not None:
                new_entries.append(entry)

            pieces.append(text[previous_end:match.start])
            pieces.append(placeholder)
            previous_end = match.start + len(match.value)

        pieces.append(text[previous_end:])
        result = "".join(pieces)
        if structural_mode:
            result = quote_leading_placeholders(result)

        Log.info(
            f"Anonymized {document_uri}: {len(matches)} matches, "
            f"{len(new_entries)} new placeholders"
        )
        return AnonymizationResult(anonymized_text=result, new_entries=new_entries)

    def _resolve(
        self,
        value: str,
        pii_type: PIIType,
        mapping: SessionMapping,
        document_uri: str,
    ) -> tuple[str, MappingEntry | None]:
        existing = mapping.lookup(value, pii_type)
        if existing is not None:
            return existing, None

        number = mapping.next_number(pii_type)
        if number > _MAX_PLACEHOLDER_NUMBER:
            Log.warning(
                f"{pii_type.value} counter reached {number}; placeholders above "
                f"{_MAX_PLACEHOLDER_NUMBER} cannot be restored"
            )
        entry = MappingEntry(
            placeholder=format_placeholder(pii_type, number),
            original=value,
            type=pii_type,
            document_uri=document_uri,
        )
        mapping.register(entry)
        return entry.placeholder, entry
