from decimal import Decimal
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('order_number', models.CharField(blank=True, max_length=20, null=True, unique=True)),
                ('order_type', models.CharField(choices=[('dine_in', 'Dine In'), ('delivery', 'Delivery'), ('pickup', 'Pickup')], default='pickup', max_length=10)),
                ('status', models.CharField(choices=[('quote_pending', 'Quote Pending'), ('quote_sent', 'Quote Sent'), ('awaiting_vendor_quote', 'Awaiting Vendor Quote'), ('awaiting_vendor_confirmation', 'Awaiting Vendor Confirmation'), ('vendor_confirmed', 'Vendor Confirmed'), ('awaiting_client_confirmation', 'Awaiting Client Confirmation'), ('client_confirmed', 'Client Confirmed'), ('out_for_delivery', 'Out for Delivery'), ('completed', 'Completed'), ('cancelled_not_billable', 'Cancelled (Not Billable)'), ('cancelled_billable', 'Cancelled (Billable)')], default='quote_pending', max_length=32)),
                ('payment_type', models.CharField(choices=[('cash', 'Cash'), ('card', 'Card'), ('paypal', 'PayPal'), ('stripe', 'Stripe'), ('ach', 'ACH')], default='cash', max_length=10)),
                ('payment_status', models.CharField(choices=[('unpaid', 'Unpaid'), ('payment_requested', 'Payment Requested'), ('paid', 'Paid')], default='unpaid', max_length=20)),
                ('total_quantity', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('total', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Sum of line totals including addons and variants, before discounts.', max_digits=14)),
                ('total_tax', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('total_charges', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('discount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Sum of per-item discounts.', max_digits=14)),
                ('manual_discount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Order-level discount applied on top of item discounts.', max_digits=14)),
                ('delivery_charge', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('specialty_item_shopping_fee', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('service_charge', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('grand_total', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('vendor_cost', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('revision', models.PositiveIntegerField(default=0, help_text='Bumped every time the order contents are edited.')),
                ('customer_note', models.TextField(blank=True, null=True)),
                ('note', models.TextField(blank=True, null=True)),
                ('packaging_note', models.TextField(blank=True, null=True)),
                ('dietary_restrictions', models.TextField(blank=True, null=True)),
                ('reheat_method', models.CharField(blank=True, max_length=255, null=True)),
                ('tail_number', models.CharField(blank=True, max_length=50, null=True)),
                ('priority', models.CharField(blank=True, max_length=50, null=True)),
                ('delivery_date', models.DateField(blank=True, null=True)),
                ('delivery_time', models.CharField(blank=True, max_length=20, null=True)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('updated_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('customer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='orders', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Order',
                'verbose_name_plural': 'Orders',
                'ordering': ['-created_at', 'order_number'],
            },
        ),
        migrations.CreateModel(
            name='OrderItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(blank=True, max_length=255, null=True)),
                ('description', models.TextField(blank=True, null=True)),
                ('price', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Unit price at the time of the order.', max_digits=14)),
                ('quantity', models.DecimalField(decimal_places=2, default=Decimal('1'), max_digits=12)),
                ('discount', models.DecimalField(blank=True, decimal_places=4, max_digits=14, null=True)),
                ('discount_type', models.CharField(choices=[('amount', 'Amount'), ('percentage', 'Percentage')], default='amount', max_length=10)),
                ('addons', models.JSONField(blank=True, default=list)),
                ('variants', models.JSONField(blank=True, default=list)),
                ('addons_amount', models.DecimalField(blank=True, decimal_places=2, default=None, max_digits=14, null=True)),
                ('variants_amount', models.DecimalField(blank=True, decimal_places=2, default=None, max_digits=14, null=True)),
                ('discount_amount', models.DecimalField(blank=True, decimal_places=2, default=None, max_digits=14, null=True)),
                ('total_price', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('grand_price', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('position', models.PositiveIntegerField(default=0)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='orders.order')),
            ],
            options={
                'verbose_name': 'Order Item',
                'verbose_name_plural': 'Order Items',
                'ordering': ['position', 'id'],
            },
        ),
        migrations.AddIndex(
            model_name='order',
            index=models.Index(fields=['status'], name='order_status_idx'),
        ),
        migrations.AddIndex(
            model_name='order',
            index=models.Index(fields=['order_type'], name='order_type_idx'),
        ),
        migrations.AddIndex(
            model_name='order',
            index=models.Index(fields=['payment_status'], name='order_pay_status_idx'),
        ),
        migrations.AddIndex(
            model_name='order',
            index=models.Index(fields=['customer', 'status'], name='order_cust_status_idx'),
        ),
        migrations.AddIndex(
            model_name='order',
            index=models.Index(fields=['created_at'], name='order_created_idx'),
        ),
    ]
