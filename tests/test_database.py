#!/usr/bin/env python3
"""
Storage tests

Tests for:
- Document round trips through memory and file storage
- Empty document on absent or corrupted data
- Upsert keys of check-ins and notes
- Friction recomputation on increment updates
- Reset and the skip-seed flag
"""

import json
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch
import sys

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.database import (
    SKIP_SEED_KEY,
    STORAGE_KEY,
    Database,
    DatabaseWriteError,
    DocumentStore,
    JsonFileStorage,
    MemoryStorage,
)
from core.models import (
    Arc,
    CheckIn,
    DailyNote,
    Document,
    Habit,
    Increment,
    Program,
    ProgramWeek,
    UserProfile,
    ValidationError,
)


def sample_document():
    return Document(
        user_profile=UserProfile(onboarded=True, age_range='25-34', busyness='Medium',
                                 optimization_focus='Health'),
        habits=[Habit(id='h1', name='Meditate', min_version='One breath', program_id='p1')],
        check_ins=[CheckIn(id='c1', habit_id='h1', date='2026-10-19', status='Partial', note='short')],
        arcs=[Arc(id='a1', name='Runner', stage='Middle')],
        increments=[Increment(id='i1', arc_id='a1', date='2026-10-19', description='5k jog',
                              effort='Medium', repeat=False)],
        daily_notes=[DailyNote(id='n1', date='2026-10-19', text='Good day')],
        programs=[Program(id='p1', title='Calm in 4 weeks', intensity='Gentle', why='Sleep',
                          weeks=[ProgramWeek(1, 'Start', ['Sit for a minute'])])],
    )


class TestDocumentStore(unittest.TestCase):

    def setUp(self):
        self.store = DocumentStore(MemoryStorage())

    def test_absent_data_gives_empty_document(self):
        document = self.store.load()
        self.assertEqual(document, Document())
        self.assertFalse(document.user_profile.onboarded)

    def test_round_trip(self):
        document = sample_document()
        self.store.save(document)
        self.assertEqual(self.store.load(), document)

    def test_corrupted_document_gives_empty_document(self):
        self.store.storage.set_item(STORAGE_KEY, '{not json')
        self.assertEqual(self.store.load(), Document())

        self.store.storage.set_item(STORAGE_KEY, json.dumps([1, 2, 3]))
        self.assertEqual(self.store.load(), Document())

    def test_malformed_sections_give_empty_document(self):
        shapes = [
            {'user_profile': 'x'},
            {'user_profile': [1, 2]},
            {'habits': 'not a list'},
            {'arcs': [5]},
            {'programs': [{'id': 'p', 'title': 't', 'weeks': [5]}]},
        ]
        for shape in shapes:
            with self.subTest(shape=shape):
                self.store.storage.set_item(STORAGE_KEY, json.dumps(shape))
                self.assertEqual(self.store.load(), Document())

    def test_repositories_survive_malformed_document(self):
        self.store.storage.set_item(STORAGE_KEY, json.dumps({'user_profile': 'x'}))
        db = Database(self.store)
        self.assertFalse(db.user.get().onboarded)
        self.assertEqual(db.habits.create('Read').name, 'Read')
        self.assertEqual(len(db.habits.find_many()), 1)

    def test_missing_sections_default_to_empty(self):
        self.store.storage.set_item(STORAGE_KEY, json.dumps({
            'user_profile': {'onboarded': True},
            'arcs': [{'id': 'a1', 'name': 'Reader'}],
        }))
        document = self.store.load()
        self.assertTrue(document.user_profile.onboarded)
        self.assertEqual(document.habits, [])
        self.assertEqual(document.programs, [])
        self.assertEqual(document.arcs[0].stage, 'Early')

    def test_other_storage_key_is_isolated(self):
        self.store.save(sample_document())
        newer = DocumentStore(self.store.storage, key='increment_app_arcs_v2')
        self.assertEqual(newer.load(), Document())

    def test_stored_friction_is_recomputed(self):
        data = sample_document().to_dict()
        data['increments'][0]['effective_friction'] = 99
        data['increments'][0]['effort'] = 'Hard'
        self.store.storage.set_item(STORAGE_KEY, json.dumps(data))
        increment = self.store.load().increments[0]
        self.assertEqual(increment.effort, 'High')
        self.assertEqual(increment.effective_friction, 3.9)


class TestJsonFileStorage(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.path = Path(self.temp_dir) / 'nested' / 'storage.json'

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_round_trip_through_file(self):
        document = sample_document()
        DocumentStore(JsonFileStorage(self.path)).save(document)
        self.assertTrue(self.path.exists())
        self.assertFalse(self.path.with_suffix('.tmp').exists())

        reopened = DocumentStore(JsonFileStorage(self.path))
        self.assertEqual(reopened.load(), document)

    def test_corrupted_file_gives_empty_document(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text('garbage', encoding='utf-8')
        self.assertEqual(DocumentStore(JsonFileStorage(self.path)).load(), Document())

    def test_remove_item(self):
        storage = JsonFileStorage(self.path)
        storage.set_item('a', '1')
        storage.set_item('b', '2')
        storage.remove_item('a')
        self.assertIsNone(storage.get_item('a'))
        self.assertEqual(storage.get_item('b'), '2')


class FailingStorage(MemoryStorage):
    """Reads work, every write fails"""

    def set_item(self, key, value):
        raise DatabaseWriteError('disk full')


class TestFailedWrites(unittest.TestCase):

    def setUp(self):
        self.db = Database(DocumentStore(FailingStorage()))

    def test_failed_create_is_not_logged_as_created(self):
        creations = [
            lambda: self.db.habits.create('Read'),
            lambda: self.db.arcs.create('Runner'),
            lambda: self.db.programs.create('Run 5k'),
        ]
        with patch('core.database.logger') as mock_logger:
            for create in creations:
                with self.assertRaises(DatabaseWriteError):
                    create()
        messages = [str(c.args[0]) for c in mock_logger.info.call_args_list]
        self.assertFalse([m for m in messages if 'created' in m])

    def test_successful_create_is_logged(self):
        db = Database.in_memory()
        with self.assertLogs('core.database', level='INFO') as logs:
            habit = db.habits.create('Read')
        self.assertTrue(any(habit.id in line for line in logs.output))


class TestRepositories(unittest.TestCase):

    def setUp(self):
        self.db = Database.in_memory()

    # ===== HABITS =====

    def test_habit_defaults_and_archive_filter(self):
        habit = self.db.habits.create('Stretch')
        self.assertEqual(habit.min_version, 'Just show up')
        self.assertFalse(habit.archived)

        self.db.habits.archive(habit.id)
        self.assertEqual(self.db.habits.find_many(), [])
        self.assertEqual(len(self.db.habits.find_many(include_archived=True)), 1)

        restored = self.db.habits.toggle_archive(habit.id)
        self.assertFalse(restored.archived)

    def test_habit_partial_update(self):
        habit = self.db.habits.create('Read', 'One page')
        updated = self.db.habits.update(habit.id, min_version='Two pages')
        self.assertEqual(updated.name, 'Read')
        self.assertEqual(updated.min_version, 'Two pages')
        self.assertEqual(updated.created_at, habit.created_at)
        self.assertEqual(self.db.habits.find(habit.id), updated)

    def test_habit_update_unknown_id_or_field(self):
        self.assertIsNone(self.db.habits.update('missing', name='x'))
        habit = self.db.habits.create('Read')
        with self.assertRaises(ValidationError):
            self.db.habits.update(habit.id, colour='red')
        with self.assertRaises(ValidationError):
            self.db.habits.create('   ')

    # ===== CHECK-INS =====

    def test_check_in_upsert_is_unique_per_habit_and_date(self):
        first = self.db.check_ins.upsert('h1', '2026-10-19', 'Pending')
        second = self.db.check_ins.upsert('h1', '2026-10-19', 'Done')
        self.assertEqual(first.id, second.id)

        check_ins = self.db.check_ins.find_many()
        self.assertEqual(len(check_ins), 1)
        self.assertEqual(check_ins[0].status, 'Done')

        self.db.check_ins.upsert('h1', '2026-10-18', 'Skip')
        self.db.check_ins.upsert('h2', '2026-10-19', 'Partial')
        self.assertEqual(len(self.db.check_ins.find_many()), 3)
        self.assertEqual(len(self.db.check_ins.find_many(date='2026-10-19')), 2)
        self.assertEqual(len(self.db.check_ins.find_many(habit_id='h1')), 2)

    def test_check_in_rejects_bad_status_and_date(self):
        with self.assertRaises(ValidationError):
            self.db.check_ins.upsert('h1', '2026-10-19', 'Maybe')
        with self.assertRaises(ValidationError):
            self.db.check_ins.upsert('h1', '19.10.2026', 'Done')
        self.assertEqual(self.db.check_ins.find_many(), [])

    # ===== INCREMENTS =====

    def test_several_increments_same_day(self):
        arc = self.db.arcs.create('Runner')
        self.db.increments.create(arc.id, '5k jog', 'Medium', True, '2026-10-19')
        self.db.increments.create(arc.id, 'Stretch', 'Low', True, '2026-10-19')
        self.assertEqual(len(self.db.increments.find_many('2026-10-19')), 2)
        self.assertEqual(len(self.db.increments.find_by_arc(arc.id)), 2)
        self.assertEqual(self.db.increments.find_many('2026-10-18'), [])

    def test_update_recomputes_friction(self):
        increment = self.db.increments.create('a1', 'Read', 'Low', True, '2026-10-19')
        self.assertEqual(increment.effective_friction, 0.9)

        updated = self.db.increments.update(increment.id, effort='High', repeat=False)
        self.assertEqual(updated.effective_friction, 3.9)
        self.assertEqual(self.db.increments.find_many()[0].effective_friction, 3.9)

    def test_friction_cannot_be_set_directly(self):
        increment = self.db.increments.create('a1', 'Read', 'Low', True, '2026-10-19')
        with self.assertRaises(ValidationError):
            self.db.increments.update(increment.id, effective_friction=0.1)
        self.assertIsNone(self.db.increments.update('missing', effort='Low'))

    # ===== NOTES =====

    def test_note_upsert_is_unique_per_date(self):
        self.db.notes.upsert('2026-10-19', 'first')
        note = self.db.notes.upsert('2026-10-19', 'second')
        self.assertEqual(len(self.db.notes.find_many()), 1)
        self.assertEqual(self.db.notes.find_unique('2026-10-19'), note)
        self.assertEqual(note.text, 'second')
        self.assertIsNone(self.db.notes.find_unique('2026-10-18'))

    def test_note_range_inclusive(self):
        for day in ('2026-10-17', '2026-10-18', '2026-10-24', '2026-10-25'):
            self.db.notes.upsert(day, day)
        in_range = self.db.notes.find_many('2026-10-18', '2026-10-24')
        self.assertEqual(sorted(n.date for n in in_range), ['2026-10-18', '2026-10-24'])

    # ===== ARCS / PROGRAMS / PROFILE =====

    def test_arc_stage_update(self):
        arc = self.db.arcs.create('Reader')
        self.assertEqual(arc.stage, 'Early')
        self.assertEqual(self.db.arcs.update(arc.id, stage='Middle').stage, 'Middle')
        with self.assertRaises(ValidationError):
            self.db.arcs.update(arc.id, stage='Ancient')

    def test_program_weeks_ordered_and_updatable(self):
        program = self.db.programs.create('Run 5k', 'Moderate', 'Health', weeks=[
            {'week_number': 2, 'title': 'Build', 'bullets': ['Run 2k']},
            {'week_number': 1, 'title': 'Start', 'bullets': ['Walk 20 min']},
        ])
        self.assertEqual([w.week_number for w in program.weeks], [1, 2])

        habit = self.db.habits.create('Run', program_id=program.id)
        self.assertEqual(habit.program_id, program.id)

        updated = self.db.programs.update(program.id, title='Run 10k')
        self.assertEqual(updated.title, 'Run 10k')
        self.assertEqual(len(updated.weeks), 2)
        self.assertEqual(self.db.programs.find(program.id), updated)

    def test_profile_merge(self):
        self.db.user.update(onboarded=True, busyness='High')
        profile = self.db.user.update(age_range='35-44')
        self.assertTrue(profile.onboarded)
        self.assertEqual(profile.busyness, 'High')
        self.assertEqual(profile.age_range, '35-44')
        with self.assertRaises(ValidationError):
            self.db.user.update(busyness='Frantic')

    def test_reset_clears_everything_and_leaves_flag(self):
        self.db.user.update(onboarded=True)
        self.db.habits.create('Read')
        self.db.arcs.create('Runner')

        self.db.user.reset()

        self.assertEqual(self.db.store.load(), Document())
        self.assertEqual(self.db.store.storage.get_item(SKIP_SEED_KEY), 'true')
        self.assertTrue(self.db.store.consume_skip_seed_flag())
        self.assertFalse(self.db.store.consume_skip_seed_flag())


if __name__ == '__main__':
    unittest.main()
