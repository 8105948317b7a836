from marshmallow import fields

from tourney.extensions import ma


class StandingSchema(ma.Schema):
    rank = fields.Integer()
    team_id = fields.String()
    team = ma.Nested("TeamSchema", only=("id", "name", "short_name"))
    played = fields.Integer()
    won = fields.Integer()
    drawn = fields.Integer()
    lost = fields.Integer()
    goals_for = fields.Integer()
    goals_against = fields.Integer()
    goal_difference = fields.Integer()
    points = fields.Integer()
