"""
현금 분개장

모든 현금 이동을 append-only 로 기록하는 단식 분개장.

사용 예시:
```python
from core.ledger import CashJournal, append_entry

async with store.transaction() as tx:
    await append_entry(tx, "Belanja #12", JournalCategory.PURCHASE, debit=100_000)

summary = await CashJournal(store).summary()
```
"""

from core.ledger.journal import CashJournal, JournalEntry, JournalSummary, append_entry

__all__ = [
    "CashJournal",
    "JournalEntry",
    "JournalSummary",
    "append_entry",
]
