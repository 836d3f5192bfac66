"""
Tests for request envelope and item serialization
"""
import json
import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from catalog_batch.exceptions import ApplicationError, ItemError, ValidationError
from catalog_batch.models import (
    Applink,
    BatchRequest,
    BatchResponse,
    ErrorRecord,
    Media,
    Method,
    Product,
    Request,
)


def make_product(**kwargs):
    return Product(
        id="sku-1",
        title="Blue Mug",
        description="A blue ceramic mug",
        availability="in stock",
        condition="new",
        price="9.99 USD",
        link="https://shop.example.com/mug",
        **kwargs
    )


class TestProductSerialization(unittest.TestCase):
    """Optional fields are omitted rather than sent as null or empty"""

    def test_required_fields_only(self):
        data = make_product().to_dict()

        self.assertEqual(data, {
            'id': 'sku-1',
            'title': 'Blue Mug',
            'description': 'A blue ceramic mug',
            'availability': 'in stock',
            'condition': 'new',
            'price': '9.99 USD',
            'link': 'https://shop.example.com/mug',
        })

    def test_required_fields_emitted_even_when_empty(self):
        product = Product(id="sku-1", title="", description="", availability="", condition="", price="", link="")

        data = product.to_dict()

        self.assertEqual(data['title'], "")
        self.assertEqual(data['link'], "")

    def test_empty_optional_string_omitted(self):
        data = make_product(brand="", color=None).to_dict()

        self.assertNotIn('brand', data)
        self.assertNotIn('color', data)

    def test_inventory_zero_is_kept(self):
        self.assertEqual(make_product(inventory=0).to_dict()['inventory'], 0)
        self.assertNotIn('inventory', make_product().to_dict())

    def test_nested_media_and_applink(self):
        product = make_product(
            image=[Media(url="https://cdn.example.com/1.jpg", tag=["front"]), Media(url="https://cdn.example.com/2.jpg")],
            applink=Applink(ios_url="shop://mug", ios_app_name="Shop"),
            additional_variant_attribute=[{"label": "Style", "value": "Matte"}],
            custom_label_2="summer",
        )

        data = product.to_dict()

        self.assertEqual(data['image'], [
            {'url': 'https://cdn.example.com/1.jpg', 'tag': ['front']},
            {'url': 'https://cdn.example.com/2.jpg'},
        ])
        self.assertEqual(data['applink'], {'ios_url': 'shop://mug', 'ios_app_name': 'Shop'})
        self.assertEqual(data['additional_variant_attribute'], [{"label": "Style", "value": "Matte"}])
        self.assertEqual(data['custom_label_2'], "summer")

    def test_empty_applink_omits_everything(self):
        self.assertEqual(Applink().to_dict(), {})

    def test_unset_applink_record_omitted(self):
        self.assertNotIn('applink', make_product(applink=Applink()).to_dict())

    def test_tuple_fields_encode_like_lists(self):
        product = make_product(
            image=(Media(url="https://cdn.example.com/1.jpg", tag=("front",)),),
            product_tags=("mugs", "kitchen"),
        )

        data = product.to_dict()

        self.assertEqual(data['image'], [{'url': 'https://cdn.example.com/1.jpg', 'tag': ['front']}])
        self.assertEqual(data['product_tags'], ["mugs", "kitchen"])
        json.dumps(data)

    def test_empty_tuple_fields_omitted(self):
        data = make_product(video=(), disabled_capabilities=()).to_dict()

        self.assertNotIn('video', data)
        self.assertNotIn('disabled_capabilities', data)


class TestBatchRequest(unittest.TestCase):
    def test_envelope_shape(self):
        batch = BatchRequest(
            access_token="token",
            requests=(Request(Method.UPDATE, make_product()), Request(Method.DELETE, make_product())),
        )

        data = batch.to_dict()

        self.assertEqual(data['access_token'], "token")
        self.assertEqual(data['item_type'], "PRODUCT_ITEM")
        self.assertFalse(data['allow_upsert'])
        self.assertEqual([r['method'] for r in data['requests']], ["UPDATE", "DELETE"])

    def test_envelope_is_immutable(self):
        batch = BatchRequest(access_token="token", requests=())

        with self.assertRaises(AttributeError):
            batch.allow_upsert = True


class TestErrors(unittest.TestCase):
    def test_error_record_rendering(self):
        record = ErrorRecord(message="Invalid token", type="OAuthException", code=190, fbtrace_id="t2")
        self.assertEqual(str(record), "OAuthException 190 Invalid token")

    def test_application_error_exposes_record(self):
        error = ApplicationError(ErrorRecord(message="Invalid token", type="OAuthException", code=190), 400)

        self.assertEqual(error.code, 190)
        self.assertEqual(error.status_code, 400)
        self.assertEqual(str(error), "OAuthException 190 Invalid token")

    def test_validation_error_render(self):
        errors = [
            ItemError("r1", ErrorRecord(message="bad price", type="param", code=100)),
            ItemError("r2", ErrorRecord(message="missing title", type="param", code=100)),
        ]

        error = ValidationError(errors, BatchResponse(handles=("h1",)))

        self.assertEqual(error.render(), "\n".join([
            "2 item validation error(s):",
            "[r1] param 100 bad price",
            "[r2] param 100 missing title",
        ]))
        self.assertEqual(str(error), error.render())


if __name__ == '__main__':
    unittest.main()
