from .rep_feedback import FeedbackLog, rep_feedback

__all__ = ['FeedbackLog', 'rep_feedback']
