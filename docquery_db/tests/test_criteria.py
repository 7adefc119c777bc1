import os
import unittest
import uuid
from unittest.mock import patch

from docquery_data_model.document import Document
from docquery_data_model.query_options import QueryExtras, QueryOptions
from docquery_db.config import Settings
from docquery_db.query.criteria import Criteria
from docquery_db.query.enumerable_context import EnumerableContext
from docquery_exception_model.exception import InvalidQueryOptionsException


class TestCriteria(unittest.TestCase):
    def setUp(self):
        self.docs = [Document.of(_id="a", number=1), Document.of(_id="b", number=2)]
        self.criteria = Criteria(documents=self.docs, collection="numbers")

    def test_defaults(self):
        criteria = Criteria()
        self.assertEqual(criteria.documents, ())
        self.assertEqual(criteria.selector, {})
        self.assertEqual(criteria.options, QueryOptions())
        self.assertEqual(criteria.query_extras, QueryExtras())

    def test_builder_calls_return_new_criteria(self):
        narrowed = self.criteria.where(number=1)
        self.assertIsNot(narrowed, self.criteria)
        self.assertEqual(self.criteria.selector, {})
        self.assertEqual(narrowed.selector, {"number": 1})

    def test_where_merges_selectors(self):
        criteria = self.criteria.where({"number": 1}).where(_id="a")
        self.assertEqual(criteria.selector, {"number": 1, "_id": "a"})

    def test_where_overrides_existing_field(self):
        criteria = self.criteria.where(number=1).where(number=2)
        self.assertEqual(criteria.selector, {"number": 2})

    def test_only_skip_limit_order_by(self):
        ordering = sorted
        criteria = self.criteria.only("number", "_id").skip(1).limit(5).order_by(ordering)
        self.assertEqual(criteria.options, QueryOptions(skip=1, limit=5, sort=ordering, fields=("number", "_id")))

    def test_invalid_skip_rejected(self):
        with self.assertRaises(InvalidQueryOptionsException):
            self.criteria.skip(-1)

    def test_extras(self):
        self.assertEqual(self.criteria.extras({"page": 3}).query_extras, QueryExtras(page=3))

    def test_unknown_extra_rejected(self):
        with self.assertRaises(InvalidQueryOptionsException):
            self.criteria.extras({"per_page": 3})

    def test_paginate(self):
        criteria = self.criteria.paginate(2, per_page=10)
        self.assertEqual(criteria.query_extras.page, 2)
        self.assertEqual(criteria.options.limit, 10)

    def test_paginate_keeps_limit_when_per_page_omitted(self):
        criteria = self.criteria.limit(7).paginate(2)
        self.assertEqual(criteria.options.limit, 7)

    def test_with_documents(self):
        criteria = Criteria().with_documents(iter(self.docs))
        self.assertEqual(criteria.documents, tuple(self.docs))

    def test_for_single_id(self):
        self.assertEqual(self.criteria.for_ids("a").selector, {"_id": "a"})

    def test_for_id_object(self):
        object_id = uuid.uuid4()
        self.assertEqual(self.criteria.for_ids(object_id).selector, {"_id": {"$in": [object_id, str(object_id)]}})

    def test_for_multiple_ids(self):
        object_id = uuid.uuid4()
        criteria = self.criteria.for_ids(("a", object_id))
        self.assertEqual(criteria.selector, {"_id": {"$in": ["a", object_id, str(object_id)]}})

    def test_for_ids_drops_duplicate_forms(self):
        object_id = uuid.uuid4()
        criteria = self.criteria.for_ids([object_id, str(object_id)])
        self.assertEqual(criteria.selector, {"_id": {"$in": [object_id, str(object_id)]}})

    def test_for_ids_keeps_existing_selector(self):
        criteria = self.criteria.where(number=2).for_ids(["a", "b"])
        self.assertEqual(criteria.context().execute(), [self.docs[1]])

    def test_for_ids_uses_configured_id_field(self):
        criteria = Criteria(settings=Settings(id_field="key"))
        self.assertEqual(criteria.for_ids("k1").selector, {"key": "k1"})

    def test_context(self):
        context = self.criteria.where(number=2).context()
        self.assertIsInstance(context, EnumerableContext)
        self.assertEqual(context.execute(), [self.docs[1]])


class TestSettings(unittest.TestCase):
    def test_defaults(self):
        settings = Settings()
        self.assertEqual(settings.default_per_page, 20)
        self.assertEqual(settings.id_field, "_id")

    def test_environment_override(self):
        with patch.dict(os.environ, {"DOCQUERY_DEFAULT_PER_PAGE": "50", "DOCQUERY_ID_FIELD": "uid"}):
            settings = Settings()
        self.assertEqual(settings.default_per_page, 50)
        self.assertEqual(settings.id_field, "uid")


if __name__ == '__main__':
    unittest.main()
