from dataclasses import dataclass

from tourney.models.team import Team


@dataclass(frozen=True)
class Standing:
    team: Team
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_difference: int = 0
    points: int = 0
    rank: int = 0

    @property
    def team_id(self):
        return self.team.id

    def __repr__(self):
        return f"<Standing {self.rank}. {self.team.id} - {self.points}pts>"
