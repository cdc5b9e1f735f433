"""SQLAlchemy tables for players, quests, progression, social features, economy, NPCs and the world."""