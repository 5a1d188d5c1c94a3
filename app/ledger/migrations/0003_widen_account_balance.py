# Running balances accumulate many amounts, so the column is wider than
# the per-record amount columns.

from decimal import Decimal

from django.db import migrations, models


class Migration(migrations.Migration):
    dependencies = [
        ("ledger", "0002_add_balance_sweep_schedule"),
    ]

    operations = [
        migrations.AlterField(
            model_name="ledgeraccount",
            name="balance",
            field=models.DecimalField(
                decimal_places=2,
                default=Decimal("0.00"),
                help_text="Running balance; positive means the party owes the business",
                max_digits=18,
            ),
        ),
    ]
