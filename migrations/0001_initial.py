"""
Initial migration for Storeman models.
"""

from decimal import Decimal
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    """Create Storeman models: tenant, catalog, stock ledger, purchase orders."""

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Organization',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('slug', models.SlugField(max_length=100, unique=True, verbose_name='Slug')),
                ('name', models.CharField(max_length=200, verbose_name='Name')),
                ('is_active', models.BooleanField(default=True, verbose_name='Active')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Organization',
                'verbose_name_plural': 'Organizations',
                'ordering': ['slug'],
            },
        ),
        migrations.CreateModel(
            name='InventorySettings',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('low_stock_threshold', models.IntegerField(default=10, verbose_name='Low stock threshold')),
                ('custom_categories', models.JSONField(blank=True, default=list)),
                ('custom_units', models.JSONField(blank=True, default=list)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('organization', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='inventory_settings', to='storeman.organization', verbose_name='Organization')),
            ],
            options={
                'verbose_name': 'Inventory settings',
                'verbose_name_plural': 'Inventory settings',
            },
        ),
        migrations.CreateModel(
            name='Location',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(help_text='Unique per organization (ex: MAIN, DEFAULT)', max_length=50, verbose_name='Code')),
                ('name', models.CharField(max_length=100, verbose_name='Name')),
                ('address', models.TextField(blank=True, default='', verbose_name='Address')),
                ('active', models.BooleanField(default=True, verbose_name='Active')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='locations', to='storeman.organization', verbose_name='Organization')),
            ],
            options={
                'verbose_name': 'Location',
                'verbose_name_plural': 'Locations',
                'ordering': ['name'],
                'constraints': [models.UniqueConstraint(fields=('organization', 'code'), name='unique_location_code_per_org')],
            },
        ),
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('sku', models.CharField(max_length=64, verbose_name='SKU')),
                ('name', models.CharField(max_length=200, verbose_name='Name')),
                ('category', models.CharField(blank=True, db_index=True, default='', max_length=100)),
                ('unit', models.CharField(blank=True, default='pcs', max_length=20)),
                ('description', models.TextField(blank=True, default='')),
                ('active', models.BooleanField(default=True, verbose_name='Active')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='products', to='storeman.organization', verbose_name='Organization')),
            ],
            options={
                'verbose_name': 'Product',
                'verbose_name_plural': 'Products',
                'ordering': ['name'],
                'indexes': [models.Index(fields=['organization', 'sku'], name='storeman_product_org_sku_idx')],
            },
        ),
        migrations.CreateModel(
            name='Supplier',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='Name')),
                ('contact_person', models.CharField(blank=True, default='', max_length=200)),
                ('email', models.EmailField(blank=True, default='', max_length=254)),
                ('phone', models.CharField(blank=True, default='', max_length=50)),
                ('address', models.TextField(blank=True, default='')),
                ('notes', models.TextField(blank=True, default='')),
                ('active', models.BooleanField(default=True, verbose_name='Active')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='suppliers', to='storeman.organization', verbose_name='Organization')),
            ],
            options={
                'verbose_name': 'Supplier',
                'verbose_name_plural': 'Suppliers',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='StockItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12, verbose_name='Quantity')),
                ('reserved_quantity', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12, verbose_name='Reserved')),
                ('average_cost', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=14, verbose_name='Average cost')),
                ('low_stock_threshold', models.IntegerField(default=10, verbose_name='Low stock threshold')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='stock_items', to='storeman.organization', verbose_name='Organization')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='stock_items', to='storeman.product', verbose_name='Product')),
                ('location', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='stock_items', to='storeman.location', verbose_name='Location')),
            ],
            options={
                'verbose_name': 'Stock item',
                'verbose_name_plural': 'Stock items',
                'indexes': [models.Index(fields=['organization', 'location'], name='storeman_item_org_loc_idx')],
                'constraints': [
                    models.UniqueConstraint(fields=('organization', 'product', 'location'), name='unique_stock_item_per_location'),
                    models.CheckConstraint(condition=models.Q(quantity__gte=0), name='stock_item_quantity_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='StockMovement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('movement_type', models.CharField(choices=[('stock_in', 'Stock in'), ('stock_out', 'Stock out'), ('adjustment', 'Adjustment')], db_index=True, max_length=20, verbose_name='Type')),
                ('quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Quantity')),
                ('unit_cost', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=14, verbose_name='Unit cost')),
                ('reference_type', models.CharField(blank=True, default='', max_length=50, verbose_name='Reference type')),
                ('reference_id', models.PositiveBigIntegerField(blank=True, null=True, verbose_name='Reference ID')),
                ('reference_line_id', models.PositiveBigIntegerField(blank=True, help_text='Purchase order line posted by this movement', null=True, verbose_name='Reference line ID')),
                ('notes', models.TextField(blank=True, default='', verbose_name='Notes')),
                ('occurred_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Occurred at')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='stock_movements', to='storeman.organization', verbose_name='Organization')),
                ('stock_item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='movements', to='storeman.stockitem', verbose_name='Stock item')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='storeman.product', verbose_name='Product')),
                ('location', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='storeman.location', verbose_name='Location')),
                ('actor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL, verbose_name='User')),
            ],
            options={
                'verbose_name': 'Stock movement',
                'verbose_name_plural': 'Stock movements',
                'ordering': ['occurred_at', 'pk'],
                'indexes': [
                    models.Index(fields=['stock_item', 'occurred_at'], name='storeman_mov_item_occ_idx'),
                    models.Index(fields=['reference_type', 'reference_id'], name='storeman_mov_ref_idx'),
                    models.Index(fields=['organization', 'occurred_at'], name='storeman_mov_org_occ_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('movement_type', 'stock_in'), ('reference_line_id__isnull', False)), fields=('reference_type', 'reference_id', 'reference_line_id'), name='unique_movement_per_reference_line'),
                ],
            },
        ),
        migrations.CreateModel(
            name='PurchaseOrder',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('po_number', models.CharField(max_length=50, verbose_name='PO number')),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('approved', 'Approved'), ('ordered', 'Ordered'), ('partially_received', 'Partially received'), ('received', 'Received'), ('cancelled', 'Cancelled')], db_index=True, default='draft', max_length=20, verbose_name='Status')),
                ('order_date', models.DateTimeField(default=django.utils.timezone.now, verbose_name='Order date')),
                ('expected_delivery_date', models.DateField(blank=True, null=True, verbose_name='Expected delivery')),
                ('received_at', models.DateTimeField(blank=True, null=True, verbose_name='Received at')),
                ('total_amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=14, verbose_name='Total amount')),
                ('notes', models.TextField(blank=True, default='')),
                ('deleted_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='purchase_orders', to='storeman.organization', verbose_name='Organization')),
                ('supplier', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='purchase_orders', to='storeman.supplier', verbose_name='Supplier')),
                ('location', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='purchase_orders', to='storeman.location', verbose_name='Receiving location')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Purchase order',
                'verbose_name_plural': 'Purchase orders',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['organization', 'status'], name='storeman_po_org_status_idx')],
                'constraints': [models.UniqueConstraint(fields=('organization', 'po_number'), name='unique_po_number_per_org')],
            },
        ),
        migrations.CreateModel(
            name='PurchaseOrderItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity_ordered', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Quantity ordered')),
                ('unit_cost', models.DecimalField(decimal_places=4, max_digits=14, verbose_name='Unit cost')),
                ('received_quantity', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12, verbose_name='Received')),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='storeman.purchaseorder', verbose_name='Purchase order')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='storeman.product', verbose_name='Product')),
            ],
            options={
                'verbose_name': 'Purchase order item',
                'verbose_name_plural': 'Purchase order items',
                'ordering': ['pk'],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(quantity_ordered__gt=0), name='po_item_quantity_positive'),
                    models.CheckConstraint(condition=models.Q(unit_cost__gte=0), name='po_item_unit_cost_non_negative'),
                ],
            },
        ),
    ]
