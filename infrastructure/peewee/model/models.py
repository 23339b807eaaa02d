from peewee import CharField, DateField, DateTimeField, Model, TextField, UUIDField

from infrastructure.peewee.session.db import db


class TaskModel(Model):
    id = UUIDField(primary_key=True)
    user_id = UUIDField(index=True)
    title = CharField(max_length=255)
    description = TextField(null=True)
    status = CharField()
    priority = CharField()
    due_date = DateField(null=True)
    created_at = DateTimeField()
    updated_at = DateTimeField()

    class Meta:
        database = db
        table_name = "tasks"
