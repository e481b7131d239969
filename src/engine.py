import csv
import logging
import re
from typing import Dict, Iterable, Iterator, List, Optional

from amount import Amount, AmountError
from errors import LedgerInvariantError, TransactionError
from ledger import Ledger
from models import AccountSnapshot, ProcessingResult, ProcessingStats, Transaction, TransactionType

logger = logging.getLogger(__name__)

_UNSIGNED = re.compile(r"[0-9]+")


def _parse_unsigned(text: str) -> int:
    """Parse a field made only of ASCII digits. Signs, underscores and other scripts are rejected."""
    if not _UNSIGNED.fullmatch(text):
        raise ValueError(f"Not an unsigned integer: {text!r}")
    return int(text)


class PaymentsEngine:
    """
    Feeds transaction records from a CSV source into the ledger.
    Rows are applied one at a time, strictly in file order.
    """

    def __init__(self, ledger: Optional[Ledger] = None):
        self._ledger = ledger if ledger is not None else Ledger()
        self._stats = ProcessingStats()

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> List[AccountSnapshot]:
        """Process CSV file and return final account states."""
        logger.info(f"Starting processing of {filepath}")

        # Undecodable bytes become U+FFFD, so the affected row fails parsing instead of the run
        with open(filepath, "r", newline="", encoding="utf-8", errors="replace") as f:
            reader = csv.DictReader(f, skipinitialspace=True)
            snapshots = self.process_rows(self._read_csv_rows(reader))

        logger.info(f"Processing complete. {self._stats.summary()}")
        return snapshots

    def _read_csv_rows(self, reader: csv.DictReader) -> Iterator[Dict[Optional[str], Optional[str]]]:
        """Yield rows from the reader, counting rows the csv module cannot split as malformed."""
        while True:
            try:
                row = next(reader)
            except StopIteration:
                return
            except csv.Error as e:
                # The reader has already consumed the offending line; carry on with the next one
                logger.warning(f"Failed to read line {reader.line_num}: {e}")
                self._stats.record_malformed()
                continue
            yield row

    def process_rows(self, rows: Iterable[Dict[Optional[str], Optional[str]]]) -> List[AccountSnapshot]:
        """Process already-split rows in order and return final account states."""
        for row in rows:
            transaction = self._parse_csv_row(row)
            if transaction is None:
                self._stats.record_malformed()
                continue
            self.process_transaction(transaction)

        return self._ledger.snapshot()

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        """
        Route a single record through the ledger.

        Returns:
            SUCCESS: Applied to the account
            REJECTED: Refused by the account, which is left unchanged

        LedgerInvariantError is never absorbed here; it aborts the run.
        """
        try:
            self._ledger.route(transaction)
        except TransactionError as e:
            self._stats.record_rejection(e)
            logger.info(f"Rejected {transaction}: {e}")
            return ProcessingResult.REJECTED
        except LedgerInvariantError as e:
            logger.critical(f"Ledger invariant violated by {transaction}: {e}")
            raise

        self._stats.record_success()
        return ProcessingResult.SUCCESS

    def _parse_csv_row(self, row: Dict[Optional[str], Optional[str]]) -> Optional[Transaction]:
        """Parse CSV row into Transaction."""
        try:
            # Extra columns land under a None key; missing trailing columns have None values
            normalized = {k.strip(): (v or "").strip() for k, v in row.items() if k is not None}

            transaction_type = TransactionType(normalized["type"].lower())
            client_id = _parse_unsigned(normalized["client"])
            transaction_id = _parse_unsigned(normalized["tx"])

            amount = None
            amount_str = normalized.get("amount", "")
            if amount_str:
                amount = Amount.parse(amount_str)

            return Transaction(
                transaction_type=transaction_type,
                client_id=client_id,
                transaction_id=transaction_id,
                amount=amount,
            )
        except (KeyError, ValueError, AmountError) as e:
            logger.warning(f"Failed to parse row {row}: {e}")
            return None
