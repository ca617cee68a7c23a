from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='BusinessSetup',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(default='Catering Co', help_text='Business name used in emails and order documents.', max_length=100)),
                ('email', models.EmailField(blank=True, max_length=254)),
                ('phone', models.CharField(blank=True, max_length=20)),
                ('notification_email', models.EmailField(blank=True, help_text='Address that receives a copy of every new order notification.', max_length=254)),
                ('currency', models.CharField(default='USD', help_text='Three-letter currency code (ISO 4217).', max_length=3)),
                ('delivery_charge', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Flat charge added to every delivery order.', max_digits=14)),
                ('order_number_prefix', models.CharField(default='KA', help_text='Two-letter prefix for order numbers (e.g. KA00042).', max_length=2)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Business Setup',
                'verbose_name_plural': 'Business Setup',
            },
        ),
    ]
