"""
Ledger application: customer/supplier accounts with running balances.

Entries (manual debits/credits) and payment transactions move an account's
balance through ledger.services.ReconciliationService, which keeps the
stored balance equal to the sum of the live records' signed amounts.
"""
